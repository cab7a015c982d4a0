from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from datetime import datetime, timezone
from serptrack.models.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Keyword(Base):
    """
    关键词数据模型
    存储每个域名下追踪的搜索关键词及其排名数据
    tags / history / last_result 以 JSON 文本存储
    """
    __tablename__ = "keywords"

    id = Column(Integer, primary_key=True, index=True)
    keyword = Column(String(500), nullable=False, comment="搜索关键词")
    device = Column(String(20), nullable=False, default="desktop", comment="设备类型 desktop / mobile")
    country = Column(String(2), nullable=False, default="US", comment="两位国家代码")
    city = Column(String(120), nullable=False, default="", comment="城市，空字符串表示不限")
    domain = Column(String(255), nullable=False, index=True, comment="所属域名")

    # 排名数据（由刷新任务维护）
    position = Column(Integer, default=0, comment="当前排名，0 表示未进入结果")
    history = Column(Text, default="{}", comment="排名历史 {日期: 排名}")
    volume = Column(Integer, default=0, comment="月搜索量")
    url = Column(String(2048), default="", comment="排名对应的页面 URL")
    last_result = Column(Text, default="[]", comment="上次抓取的自然结果")
    last_update_error = Column(Text, nullable=True, comment="上次抓取错误")

    # 用户数据
    tags = Column(Text, default="[]", comment="标签列表")
    sticky = Column(Boolean, default=False, comment="是否置顶")
    updating = Column(Boolean, default=False, comment="是否正在刷新")

    last_updated = Column(DateTime, default=utcnow, comment="上次更新时间")
    added = Column(DateTime, default=utcnow, comment="添加时间")

    def __repr__(self):
        return f"<Keyword(id={self.id}, keyword='{self.keyword}', domain='{self.domain}')>"
