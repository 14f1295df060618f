from PySide6.QtGui import QFont


class DashboardTheme:
    COLOR1 = "#150049"
    COLOR2 = "#8EFBFF"

    SECONDARY_BUTTON_BG = "#D0CCDB"

    APP_BG = "#F6F5FA"
    CONTENT_BOX_BG = "#FFFFFF"

    BORDER_12 = "rgba(21, 0, 73, 0.12)"
    BORDER_8 = "rgba(21, 0, 73, 0.08)"

    COLOR1_60 = "rgba(21, 0, 73, 0.60)"
    COLOR1_04 = "rgba(21, 0, 73, 0.04)"

    SUCCESS = "#10B981"
    WARNING = "#F59E0B"
    ERROR = "#EF4444"
    INFO = "#6366F1"

    SEVERITY_COLORS = {
        "success": SUCCESS,
        "info": INFO,
        "warn": WARNING,
        "error": ERROR,
    }

    @staticmethod
    def get_main_stylesheet() -> str:
        return f"""
        QMainWindow {{
            background-color: {DashboardTheme.APP_BG};
            font-family: "Geist", -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            font-size: 16px;
            font-weight: 400;
        }}

        QWidget#app_container {{
            background-color: {DashboardTheme.APP_BG};
        }}

        QWidget#header {{
            background-color: {DashboardTheme.CONTENT_BOX_BG};
            border-bottom: 1px solid {DashboardTheme.BORDER_12};
        }}

        QLabel#app_title {{
            color: {DashboardTheme.COLOR1};
            font-size: 24px;
            font-weight: 600;
        }}

        QWidget#wallet_info {{
            background-color: {DashboardTheme.COLOR1_04};
            border: 1px solid {DashboardTheme.BORDER_12};
            border-radius: 8px;
        }}

        QLabel#wallet_address {{
            color: {DashboardTheme.COLOR1_60};
            font-family: "JetBrains Mono", monospace;
            font-size: 12px;
        }}

        QLabel#badge_voted {{
            background-color: {DashboardTheme.SUCCESS};
            color: #FFFFFF;
            border-radius: 10px;
            padding: 2px 10px;
            font-size: 12px;
            font-weight: 500;
        }}

        QLabel#badge_not_voted {{
            background-color: {DashboardTheme.WARNING};
            color: #FFFFFF;
            border-radius: 10px;
            padding: 2px 10px;
            font-size: 12px;
            font-weight: 500;
        }}

        QLabel#section_title {{
            color: {DashboardTheme.COLOR1};
            font-size: 18px;
            font-weight: 500;
        }}

        QLabel#total_votes {{
            color: {DashboardTheme.COLOR1};
            font-size: 18px;
            font-weight: 600;
        }}

        QWidget#content_box {{
            background-color: {DashboardTheme.CONTENT_BOX_BG};
            border: 1px solid {DashboardTheme.BORDER_8};
            border-radius: 8px;
        }}

        QWidget#proposal_card {{
            background-color: {DashboardTheme.CONTENT_BOX_BG};
            border: 1px solid {DashboardTheme.BORDER_12};
            border-radius: 12px;
        }}

        QLabel#card_title {{
            color: {DashboardTheme.COLOR1};
            font-size: 16px;
            font-weight: 600;
        }}

        QLabel#card_votes {{
            color: {DashboardTheme.COLOR1};
            font-size: 20px;
            font-weight: 700;
        }}

        QLabel#stat_label {{
            color: {DashboardTheme.COLOR1};
            font-size: 14px;
        }}

        QDialog#modal_dialog {{
            background-color: {DashboardTheme.CONTENT_BOX_BG};
            border: 2px solid {DashboardTheme.BORDER_8};
            border-radius: 12px;
        }}

        QLabel#modal_title {{
            color: {DashboardTheme.COLOR1};
            font-size: 24px;
            font-weight: 500;
        }}

        QLabel#modal_message {{
            color: {DashboardTheme.COLOR1};
            font-size: 16px;
            line-height: 1.5;
        }}

        QPushButton#primary_button {{
            background-color: {DashboardTheme.COLOR1};
            color: {DashboardTheme.COLOR2};
            border: none;
            border-radius: 4px;
            padding: 12px 32px;
            font-size: 16px;
        }}

        QPushButton#primary_button:hover {{
            background-color: rgba(21, 0, 73, 0.9);
        }}

        QPushButton#primary_button:pressed {{
            background-color: rgba(21, 0, 73, 0.8);
        }}

        QPushButton#primary_button:disabled {{
            background-color: rgba(21, 0, 73, 0.35);
            color: rgba(142, 251, 255, 0.6);
        }}

        QPushButton#secondary_button {{
            background-color: {DashboardTheme.SECONDARY_BUTTON_BG};
            color: {DashboardTheme.COLOR1};
            border: none;
            border-radius: 4px;
            padding: 12px 32px;
            font-size: 16px;
        }}

        QPushButton#secondary_button:hover {{
            background-color: rgba(208, 204, 219, 0.8);
        }}

        QPushButton#secondary_button:disabled {{
            background-color: rgba(208, 204, 219, 0.4);
            color: {DashboardTheme.COLOR1_60};
        }}

        QLabel {{
            color: {DashboardTheme.COLOR1};
        }}

        QStatusBar {{
            background-color: {DashboardTheme.CONTENT_BOX_BG};
            border-top: 1px solid {DashboardTheme.BORDER_12};
            font-size: 14px;
        }}
        """

    @staticmethod
    def get_font_system():
        fonts = {}

        primary_font = QFont()
        primary_font.setFamilies([
            "Geist",
            "-apple-system",
            "BlinkMacSystemFont",
            "Segoe UI",
            "Roboto",
            "sans-serif",
        ])
        primary_font.setPointSize(14)
        primary_font.setWeight(QFont.Weight.Normal)
        fonts["primary"] = primary_font

        return fonts
