"""web_parser.crawler: обход сайта, реестры, пулы разрешений и приёмники результатов."""
