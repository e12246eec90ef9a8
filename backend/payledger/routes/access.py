"""
Access Routes — Purchase listings and entitlement-gated downloads.
"""
from fastapi import APIRouter, Depends

from payledger.config import Settings
from payledger.dependencies import get_app_settings, get_entitlement_service
from payledger.exceptions import AccessDenied, ConfigurationError, RecordNotFound
from payledger.schemas.schemas import (
    AccessRequest, AccessResponse, DownloadResponse, UserPurchasesRequest, UserPurchasesResponse,
)
from payledger.services.entitlement_service import EntitlementService
from payledger.services.plan_catalog import downloads
from payledger.utils.logger import get_logger

router = APIRouter(prefix="/api", tags=["Access"])
logger = get_logger(__name__)


@router.post("/user-purchases", response_model=UserPurchasesResponse)
def user_purchases(payload: UserPurchasesRequest, entitlements: EntitlementService = Depends(get_entitlement_service)):
    """All successful purchases for a user (lifetime access)."""
    purchases = entitlements.list_purchases(payload.user_id)
    return UserPurchasesResponse(purchases=purchases, total_purchases=len(purchases))


@router.post("/verify-download-access", response_model=AccessResponse)
def verify_download_access(payload: AccessRequest, entitlements: EntitlementService = Depends(get_entitlement_service)):
    """Grant iff (userId, gateway paymentId, success) is in the ledger; 403 otherwise."""
    record = entitlements.check_access(payload.user_id, payload.payment_id)
    return AccessResponse(payment=record)


@router.post("/download/{resource}", response_model=DownloadResponse)
def download(
    resource: str,
    payload: AccessRequest,
    entitlements: EntitlementService = Depends(get_entitlement_service),
    settings: Settings = Depends(get_app_settings),
):
    """Download link for a purchased resource."""
    item = downloads(settings).get(resource)
    if item is None:
        raise RecordNotFound("Unknown download")

    record = entitlements.check_access(payload.user_id, payload.payment_id)
    if record.plan != item.plan:
        logger.warning(f"User {payload.user_id} denied {resource}: payment {record.id} is for plan {record.plan}")
        raise AccessDenied()
    if not item.file_id:
        raise ConfigurationError(f"{resource.capitalize()} file not configured")

    return DownloadResponse(download_url=item.url, file_name=item.file_name)
