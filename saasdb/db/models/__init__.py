from saasdb.db.models.activity_log import ActivityLogEntry
from saasdb.db.models.activity_schedule import ScheduledActivity
from saasdb.db.models.admin_users import AdminUser
from saasdb.db.models.affiliate_referrals import AffiliateReferral
from saasdb.db.models.affiliates import Affiliate
from saasdb.db.models.analytics_events import AnalyticsEvent
from saasdb.db.models.api_usage import ApiUsage
from saasdb.db.models.auth_audit_log import AuthAuditLogEntry
from saasdb.db.models.cognitive_distortions import CognitiveDistortion
from saasdb.db.models.coping_strategies import CopingStrategy
from saasdb.db.models.core_beliefs import CoreBelief
from saasdb.db.models.daily_metrics import DailyMetrics
from saasdb.db.models.emotion_definitions import EmotionDefinition
from saasdb.db.models.emotion_ratings import EmotionRating
from saasdb.db.models.exposure_attempts import ExposureAttempt
from saasdb.db.models.exposure_hierarchies import ExposureHierarchy
from saasdb.db.models.exposure_steps import ExposureStep
from saasdb.db.models.homework_assignments import HomeworkAssignment
from saasdb.db.models.mood_entries import MoodEntry
from saasdb.db.models.physical_sensation_definitions import PhysicalSensationDefinition
from saasdb.db.models.promo_code_redemptions import PromoCodeRedemption
from saasdb.db.models.promo_codes import PromoCode
from saasdb.db.models.relapse_prevention_plan import RelapsePreventionPlan
from saasdb.db.models.safety_behaviors import SafetyBehavior
from saasdb.db.models.therapist_patient_relationships import TherapistPatientRelationship
from saasdb.db.models.therapists import Therapist
from saasdb.db.models.therapy_sessions import TherapySession
from saasdb.db.models.thought_record_distortions import ThoughtRecordDistortion
from saasdb.db.models.thought_records import ThoughtRecord
from saasdb.db.models.user_auth_providers import UserAuthProvider
from saasdb.db.models.user_profiles import UserProfile
from saasdb.db.models.user_sessions import UserSession
from saasdb.db.models.users import User
from saasdb.db.models.values_assessment import ValuesAssessment

__all__ = [
    "ActivityLogEntry",
    "AdminUser",
    "Affiliate",
    "AffiliateReferral",
    "AnalyticsEvent",
    "ApiUsage",
    "AuthAuditLogEntry",
    "CognitiveDistortion",
    "CopingStrategy",
    "CoreBelief",
    "DailyMetrics",
    "EmotionDefinition",
    "EmotionRating",
    "ExposureAttempt",
    "ExposureHierarchy",
    "ExposureStep",
    "HomeworkAssignment",
    "MoodEntry",
    "PhysicalSensationDefinition",
    "PromoCode",
    "PromoCodeRedemption",
    "RelapsePreventionPlan",
    "SafetyBehavior",
    "ScheduledActivity",
    "TherapistPatientRelationship",
    "Therapist",
    "TherapySession",
    "ThoughtRecord",
    "ThoughtRecordDistortion",
    "User",
    "UserAuthProvider",
    "UserProfile",
    "UserSession",
    "ValuesAssessment",
]
