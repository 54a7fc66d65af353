"""
Helpers for inventory item names and low-stock checks.

Items can be model instances or plain dicts (e.g. rows posted by the
console), so field access goes through ``_field``.
"""


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def normalize_inventory_name(name):
    """Normalize an inventory item name for comparison (trim and lowercase)"""
    return (name or '').strip().lower()


def is_duplicate_inventory_name(name, inventory_list, exclude_id=None):
    """
    Check if an inventory item name already exists in the list.

    Args:
        name: The name to check
        inventory_list: Items carrying ``id`` and ``item_name``
        exclude_id: Optional ID to skip (the item being edited)

    Returns:
        True if another item has the same normalized name. Blank names are
        never duplicates.
    """
    normalized = normalize_inventory_name(name)
    if not normalized:
        return False

    for item in inventory_list:
        if exclude_id is not None and _field(item, 'id') == exclude_id:
            continue
        if normalize_inventory_name(_field(item, 'item_name')) == normalized:
            return True
    return False


def is_low_stock(item):
    """An item is low on stock once final stock has reached or fallen below its minimum"""
    return int(_field(item, 'final_stock') or 0) <= int(_field(item, 'minimum_stock') or 0)


def filter_low_stock_items(items):
    return [item for item in items if is_low_stock(item)]
