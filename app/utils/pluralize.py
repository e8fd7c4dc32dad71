"""Russian plural forms for counts shown in reports."""

from collections.abc import Sequence

LESSON_FORMS = ("занятие", "занятия", "занятий")
HOUR_FORMS = ("час", "часа", "часов")
STUDENT_FORMS = ("ученик", "ученика", "учеников")
TIME_FORMS = ("раз", "раза", "раз")
WEEK_FORMS = ("неделю", "недели", "недель")


def pluralize(n: int, forms: Sequence[str]) -> str:
    """
    Pick the form matching ``n`` from ``(one, few, many)``.

    >>> pluralize(1, LESSON_FORMS)
    'занятие'
    >>> pluralize(3, LESSON_FORMS)
    'занятия'
    >>> pluralize(11, LESSON_FORMS)
    'занятий'
    """
    n10 = abs(n) % 10
    n100 = abs(n) % 100

    if 10 < n100 < 20:
        return forms[2]
    if n10 == 1:
        return forms[0]
    if 2 <= n10 <= 4:
        return forms[1]
    return forms[2]


def pluralize_with_number(n: int, forms: Sequence[str]) -> str:
    """Return ``"5 занятий"``-style text."""
    return f"{n} {pluralize(n, forms)}"
