# core/paging.py
from django.conf import settings


def load_all(queryset, page_size=None):
    """
    Reads every row of ``queryset`` in fixed-size pages and returns them as a list.

    Paging stops on the first empty or short page. Unordered querysets are
    ordered by primary key so that pages never overlap.
    """
    page_size = page_size or settings.LISTING_PAGE_SIZE
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if not queryset.ordered:
        queryset = queryset.order_by('pk')

    rows = []
    page = 0
    while True:
        start = page * page_size
        batch = list(queryset[start:start + page_size])
        rows.extend(batch)
        page += 1
        if len(batch) < page_size:
            break
    return rows
