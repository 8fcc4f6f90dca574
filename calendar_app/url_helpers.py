from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme

def with_date(url_name: str, d) -> str:
    return f"{reverse(url_name)}?date={d:%Y-%m-%d}"

def safe_return_to(request, value: str | None, default: str) -> str:
    """Only allow redirects back into this site."""
    if value and url_has_allowed_host_and_scheme(value, allowed_hosts={request.get_host()}):
        return value
    return default
