from .day import DayKind

# Source of the official production calendar, one page per year: {CONSULTANT_URL}/{year}
CONSULTANT_URL = "https://www.consultant.ru/law/ref/calendar/proizvodstvennye"

# The source publishes production calendars starting from this year
FIRST_PUBLISHED_YEAR = 2015

DEFAULT_TIMEOUT = 10.0

MONTHS = {
    "Январь": 1,
    "Февраль": 2,
    "Март": 3,
    "Апрель": 4,
    "Май": 5,
    "Июнь": 6,
    "Июль": 7,
    "Август": 8,
    "Сентябрь": 9,
    "Октябрь": 10,
    "Ноябрь": 11,
    "Декабрь": 12,
}

# CSS class of a day cell in the month tables -> kind of the override record.
# "work" marks a moved working day on what would otherwise be a weekend.
CELL_CLASSES = {
    "holiday": DayKind.HOLIDAY,
    "preholiday": DayKind.PREHOLIDAY,
    "work": DayKind.WORK,
}

# Cells of neighbouring months shown to fill the first and last weeks
INACTIVE_CELL_CLASS = "inactive"

# Characters decorating the day number in a cell (non-breaking space, preholiday star)
CELL_DECORATIONS = ("\xa0", "*")
