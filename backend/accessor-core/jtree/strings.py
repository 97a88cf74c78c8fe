def capitalize(value: str) -> str:
    # only the first character changes: "uRL" -> "URL", "" -> ""
    if not value:
        return value
    return value[0].upper() + value[1:]
