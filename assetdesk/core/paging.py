import math

PAGE_SIZE = 48
PAGE_WINDOW = 5

def total_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / page_size)

def offset_for(page: int, page_size: int = PAGE_SIZE) -> int:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    return (page - 1) * page_size

def clamp_page(page: int, pages: int) -> int:
    """Keep ``page`` inside ``[1, pages]``; with no pages known, only the lower bound applies."""
    if page < 1:
        return 1
    if pages >= 1 and page > pages:
        return pages
    return page

def page_window(page: int, pages: int, width: int = PAGE_WINDOW) -> list[int]:
    if pages <= 0:
        return []
    start = max(1, min(page - 2, pages - (width - 1)))
    return [start + i for i in range(min(width, pages))]
