from .auth import LoginRequest, LoginResponse, PasswordUpdate
from .profiles import ProfileRole, ProfileGet, ProfileDetailsUpdate, ProfileMeUpdate
from .offerings import CourseOfferingGet, CourseOfferingDetail, AvailableOffering
from .receipts import ReceiptQuery, ReceiptGet, ReceiptReview
from .students import RosterEntry, RosterStudent
