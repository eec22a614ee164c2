from portal.models.student import Student
from portal.models.submission import Submission
from portal.models.setting import Setting, SETTING_KEY

__all__ = ["Student", "Submission", "Setting", "SETTING_KEY"]
