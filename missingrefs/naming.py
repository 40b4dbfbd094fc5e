"""Human-readable property names."""

from __future__ import annotations


def nicify_variable_name(name: str) -> str:
    """Turn a declared field name into a display label.

    Drops an ``m_`` / ``k`` / leading-underscore prefix, splits camelCase and
    acronym boundaries, separates trailing digits and capitalises the first
    letter: ``m_targetTransform`` -> ``Target Transform``, ``HTTPServer``
    -> ``HTTP Server``, ``slot2`` -> ``Slot 2``.
    """
    if name.startswith("m_"):
        name = name[2:]
    elif len(name) > 1 and name[0] == "k" and name[1].isupper():
        name = name[1:]
    name = name.lstrip("_").replace("_", " ")
    if not name:
        return ""

    out = []
    for i, ch in enumerate(name):
        if i > 0 and name[i - 1] != " ":
            prev = name[i - 1]
            nxt = name[i + 1] if i + 1 < len(name) else ""
            if ch.isupper() and (prev.islower() or prev.isdigit() or (prev.isupper() and nxt.islower())):
                out.append(" ")
            elif ch.isdigit() and prev.isalpha():
                out.append(" ")
        out.append(ch)

    result = "".join(out)
    return result[0].upper() + result[1:]
