from sqlalchemy import Column, Integer, String, Text
from serptrack.models.database import Base


class AppSettings(Base):
    """应用设置模型（单行，id 固定为 1）"""
    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True, index=True, default=1)
    scraper_type = Column(String(50), nullable=True)
    scraping_api = Column(String(500), nullable=True)
    search_console_client_email = Column(String(255), nullable=True)
    search_console_private_key = Column(Text, nullable=True)
    adwords_client_id = Column(String(255), nullable=True)
    adwords_client_secret = Column(String(255), nullable=True)
    adwords_refresh_token = Column(String(500), nullable=True)
    adwords_developer_token = Column(String(255), nullable=True)
    adwords_account_id = Column(String(50), nullable=True)
