# resolve360/services/__init__.py
from ..config import settings
from .catalog import RoutingConfig, load_routing_config
from .roles import Role, RoleResolver, reconcile_role
from .classifier import ClassificationResult, IssueClassifier
from .assigner import ContractorAssigner
from .lifecycle import IssueLifecycle, IssueStatus, TransitionPolicy
from .image_storage import ImageStorage, StoredImage

# Built once at start-up and shared by the routes
routing_config = load_routing_config(settings)
role_resolver = RoleResolver(routing_config)
issue_classifier = IssueClassifier(routing_config)
contractor_assigner = ContractorAssigner(routing_config)
issue_lifecycle = IssueLifecycle(TransitionPolicy(settings.issue_transition_policy))
image_storage = ImageStorage(
    upload_url=settings.image_upload_url,
    upload_preset=settings.image_upload_preset,
    upload_dir=settings.upload_dir,
    timeout=settings.image_upload_timeout,
)

__all__ = [
    "RoutingConfig",
    "Role",
    "RoleResolver",
    "reconcile_role",
    "ClassificationResult",
    "IssueClassifier",
    "ContractorAssigner",
    "IssueLifecycle",
    "IssueStatus",
    "TransitionPolicy",
    "ImageStorage",
    "StoredImage",
    "routing_config",
    "role_resolver",
    "issue_classifier",
    "contractor_assigner",
    "issue_lifecycle",
    "image_storage"
]
