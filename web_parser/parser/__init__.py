"""web_parser.parser: извлечение читаемого текста из HTML."""
