# 엔드포인트별 페이지네이션 제한
class PaginationLimits:
    ACTIVITY_LOGS = {"min": 1, "max": 500, "default": 100}
