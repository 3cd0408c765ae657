"""
Flash Messages

One-time status messages that survive a redirect.

A message is appended to the cookie session under a category ("info" by
default) and removed the first time a page reads that category.

Usage:
    flash(request, "User already exists")
    return RedirectResponse("/users/signup", status_code=303)

    # on the next request
    messages = get_flashed_messages(request, "info")
"""

from starlette.requests import Request

FLASH_KEY = "_flashes"


def flash(request: Request, message: str, category: str = "info") -> None:
    """Queue a message for the next rendered page."""
    flashes = request.session.get(FLASH_KEY, {})
    flashes.setdefault(category, []).append(message)
    request.session[FLASH_KEY] = flashes


def get_flashed_messages(request: Request, category: str = "info") -> list[str]:
    """Pop and return the queued messages of one category."""
    flashes = request.session.get(FLASH_KEY)
    if not flashes or category not in flashes:
        return []
    messages = flashes.pop(category)
    if flashes:
        request.session[FLASH_KEY] = flashes
    else:
        request.session.pop(FLASH_KEY, None)
    return messages
