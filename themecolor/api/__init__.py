"""ThemeColor HTTP routers."""
