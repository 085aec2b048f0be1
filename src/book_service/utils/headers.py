"""
Response header helpers: entity alerts and pagination links
"""

from typing import Dict, List

from starlette.datastructures import URL

from book_service.models.pagination import Page


def create_alert(application_name: str, message: str, param: str) -> Dict[str, str]:
    return {
        f"X-{application_name}-alert": message,
        f"X-{application_name}-params": param,
    }


def create_entity_creation_alert(application_name: str, entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(application_name, f"{application_name}.{entity_name}.created", param)


def create_entity_update_alert(application_name: str, entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(application_name, f"{application_name}.{entity_name}.updated", param)


def create_entity_deletion_alert(application_name: str, entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(application_name, f"{application_name}.{entity_name}.deleted", param)


def create_failure_alert(application_name: str, entity_name: str, error_key: str) -> Dict[str, str]:
    return {
        f"X-{application_name}-error": f"error.{error_key}",
        f"X-{application_name}-params": entity_name,
    }


def _prepare_link(url: URL, page_number: int, page_size: int, relation: str) -> str:
    target = url.include_query_params(page=page_number, size=page_size)
    return f'<{target}>; rel="{relation}"'


def generate_pagination_headers(url: URL, page: Page) -> Dict[str, str]:
    """
    Build X-Total-Count and Link headers for a page of results

    Args:
        url: The request URL; other query params are carried into each link
        page: The page that was served

    Returns:
        Header name to value mapping
    """
    number = page.number
    size = page.size
    last_page = page.total_pages - 1

    links: List[str] = []
    if number < last_page:
        links.append(_prepare_link(url, number + 1, size, "next"))
    if number > 0:
        links.append(_prepare_link(url, number - 1, size, "prev"))
    links.append(_prepare_link(url, last_page, size, "last"))
    links.append(_prepare_link(url, 0, size, "first"))

    return {
        "X-Total-Count": str(page.total),
        "Link": ",".join(links),
    }
