from .base import ApiModel


class CalendarTokenResponse(ApiModel):
    token: str
