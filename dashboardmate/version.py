APP_NAME = "DashboardMate"
APP_VERSION = "1.4.0"
