from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.menu.menu_item import MenuItem
from app.schemas.menu_item import MenuItemCreate, MenuItemUpdate
import uuid


async def create_menu_item(db: AsyncSession, tenant_id: int, item: MenuItemCreate):
    """Create a new menu item for a tenant"""
    new_item = MenuItem(
        id=str(uuid.uuid4()),
        tenant_id=tenant_id,
        **item.model_dump(),
    )
    db.add(new_item)
    await db.commit()
    await db.refresh(new_item)
    return new_item


async def get_menu_items(db: AsyncSession, tenant_id: int, available_only: bool = False):
    """Get all menu items for a tenant, newest first"""
    query = select(MenuItem).where(MenuItem.tenant_id == tenant_id)

    if available_only:
        query = query.where(MenuItem.is_available == True)

    query = query.order_by(MenuItem.created_at.desc(), MenuItem.name)
    result = await db.execute(query)
    return result.scalars().all()


async def get_menu_item(db: AsyncSession, item_id: str, tenant_id: int):
    result = await db.execute(
        select(MenuItem).where(MenuItem.id == item_id, MenuItem.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def update_menu_item(db: AsyncSession, item_id: str, tenant_id: int, updates: MenuItemUpdate):
    item = await get_menu_item(db, item_id, tenant_id)
    if not item:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(item, key, value)

    await db.commit()
    await db.refresh(item)
    return item


async def delete_menu_item(db: AsyncSession, item_id: str, tenant_id: int):
    item = await get_menu_item(db, item_id, tenant_id)
    if item:
        await db.delete(item)
        await db.commit()
    return item
