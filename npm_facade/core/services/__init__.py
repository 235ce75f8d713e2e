"""Services — command building, output parsing, the npm command table."""
