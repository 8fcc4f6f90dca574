def looks_like_phone(request) -> bool:
    ua = (request.META.get("HTTP_USER_AGENT") or "").lower()

    # iPads and Android tablets get the full week grid
    if "ipad" in ua or "tablet" in ua:
        return False

    if any(x in ua for x in ["iphone", "ipod", "windows phone"]):
        return True

    # Android phones advertise "mobile", Android tablets do not
    return "android" in ua and "mobile" in ua
