CATEGORIES = ["Packing Material", "Electronics", "Tools", "Miscellaneous"]

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"

# Most urgent first
REORDER_PRIORITY = {OUT_OF_STOCK: 0, LOW_STOCK: 1, IN_STOCK: 2}


def calculate_inventory_status(quantity: int, min_stock: int) -> str:
    if quantity <= 0:
        return OUT_OF_STOCK
    if quantity < min_stock:
        return LOW_STOCK
    return IN_STOCK


def needs_reorder(status: str) -> bool:
    return status in (OUT_OF_STOCK, LOW_STOCK)


def remaining_after_use(quantity: int, used: int) -> int:
    """Quantity left after taking ``used`` items out; never below zero."""
    return max(0, quantity - used)
