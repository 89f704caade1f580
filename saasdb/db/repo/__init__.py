from saasdb.db.repo.activity_repo import ActivityRepo
from saasdb.db.repo.admin_users_repo import AdminUsersRepo
from saasdb.db.repo.affiliates_repo import AffiliatesRepo
from saasdb.db.repo.analytics_repo import AnalyticsRepo
from saasdb.db.repo.auth_audit_repo import AuthAuditRepo
from saasdb.db.repo.exposure_repo import ExposureRepo
from saasdb.db.repo.homework_repo import HomeworkRepo
from saasdb.db.repo.mood_repo import MoodRepo
from saasdb.db.repo.promo_repo import PromoRepo
from saasdb.db.repo.self_work_repo import SelfWorkRepo
from saasdb.db.repo.therapists_repo import TherapistsRepo
from saasdb.db.repo.thought_records_repo import ThoughtRecordsRepo
from saasdb.db.repo.user_sessions_repo import UserSessionsRepo
from saasdb.db.repo.users_repo import UsersRepo

__all__ = [
    "ActivityRepo",
    "AdminUsersRepo",
    "AffiliatesRepo",
    "AnalyticsRepo",
    "AuthAuditRepo",
    "ExposureRepo",
    "HomeworkRepo",
    "MoodRepo",
    "PromoRepo",
    "SelfWorkRepo",
    "TherapistsRepo",
    "ThoughtRecordsRepo",
    "UserSessionsRepo",
    "UsersRepo",
]
