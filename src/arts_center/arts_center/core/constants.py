"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# 0 = Chủ nhật (Sunday), 1..6 = Thứ 2..Thứ 7
SUNDAY = 0
DAY_LABELS = {
    0: "Chủ nhật",
    1: "Thứ 2",
    2: "Thứ 3",
    3: "Thứ 4",
    4: "Thứ 5",
    5: "Thứ 6",
    6: "Thứ 7",
}

# Giờ bắt đầu -> buổi: [0, 12) sáng, [12, 18) chiều, còn lại tối
AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 18

DEFAULT_PRORATION_CUTOFF_DAY = 15
DEFAULT_PAGE_FETCH_WORKERS = 5
DEFAULT_SESSION_CACHE_SIZE = 256

SALARY_MARKER = "lương"
SALARY_REASON_TEMPLATE = "Lương T{month}/{year}"

SUBJECTS = ("Piano", "Trống", "Vẽ", "Múa", "Guitar", "Nhảy", "Ballet")
