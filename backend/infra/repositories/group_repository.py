from typing import Optional
from sqlmodel import Session, select

from domain.models.song import Group
from utils.logger import get_logger

logger = get_logger(__name__)

class GroupRepository:
    """
    commit は呼び出し側 (SongAppService) が行う。
    ここでは flush までにとどめ、同一トランザクション内で ID を確定させる。
    """
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self.session.get(Group, group_id)

    def find_by_name(self, name: str) -> Optional[Group]:
        return self.session.exec(select(Group).where(Group.name == name)).first()

    def create(self, name: str) -> Group:
        group = Group(name=name)
        self.session.add(group)
        self.session.flush()
        return group

    def find_or_create(self, name: str) -> Group:
        group = self.find_by_name(name)
        if group:
            return group

        logger.debug(f"Group not found, adding new group: {name}")
        group = self.create(name)
        logger.debug(f"New group added with ID: {group.id}")
        return group

    def rename(self, group_id: int, name: str) -> Optional[Group]:
        group = self.get_by_id(group_id)
        if group:
            group.name = name
            self.session.add(group)
            self.session.flush()
        return group
