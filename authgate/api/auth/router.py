"""
Authentication router: registration with TOTP enrollment, password + TOTP login,
and re-provisioning of the TOTP secret.
"""

from fastapi import APIRouter, Depends, Request
from authgate.api.utils import api_response, client_ip, get_store, get_verification_service
from authgate.api.anti_abuse import register_failed_ip
from authgate.api.rate_limiter import limiter, auth_rate_limit
from authgate.common.log_handler import log
from authgate.common.qr import render_qr_data_url
from authgate.database.store import AccountExists, AccountStore
from authgate.otp import InvalidEncoding, Registration, VerificationOutcome, VerificationService
from .schemas import LoginRequest, LoginResponse, ProvisioningResponse, RegisterRequest
from .password_utils import hash_password, verify_password

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
)

INVALID_CREDENTIALS = "Invalid username, password, or TOTP code"

# Checked against on unknown usernames so they cost the same bcrypt round as a wrong password
_DUMMY_PASSWORD_HASH = hash_password("authgate-dummy-password")


def _provisioning_data(username: str, registration: Registration) -> dict:
    return {
        "username": username,
        "secret": registration.secret_base32,
        "provisioning_uri": registration.provisioning_uri,
        "qr_code": render_qr_data_url(registration.provisioning_uri),
    }


async def _reject(request: Request):
    await register_failed_ip(request)
    return api_response(
        message=INVALID_CREDENTIALS,
        success=False,
        status_code=401
    )


async def _check_credentials(request: Request, credentials: LoginRequest, store: AccountStore,
                             service: VerificationService):
    """
    Run the password and TOTP checks shared by login and re-provisioning.

    Returns:
        (outcome, None) when both checks ran, or (None, response) when the
        request has to be answered right away
    """
    ip = client_ip(request)
    account = await store.get_account(credentials.username)

    if not account:
        verify_password(credentials.password, _DUMMY_PASSWORD_HASH)
        log.warning(f"Login attempt with unknown username '{credentials.username}' from {ip}")
        return None, await _reject(request)

    if not verify_password(credentials.password, account.password_hash):
        log.warning(f"Login attempt with invalid password for '{credentials.username}' from {ip}")
        return None, await _reject(request)

    try:
        outcome = service.verify_login(account.totp_secret, credentials.totp_code)
    except InvalidEncoding as e:
        log.error(f"Stored TOTP secret for '{credentials.username}' is not valid Base32: {e}")
        return None, await _reject(request)

    if outcome is VerificationOutcome.REJECTED_MISSING_SECRET:
        log.warning(f"Login attempt for '{credentials.username}' without an enrolled TOTP secret from {ip}")
        return None, api_response(
            message="Two-factor enrollment required",
            data={"username": credentials.username, "outcome": outcome.value},
            success=False,
            status_code=403
        )

    if outcome is VerificationOutcome.REJECTED_BAD_CODE:
        log.warning(f"Login attempt with invalid TOTP code for '{credentials.username}' from {ip}")
        return None, await _reject(request)

    return outcome, None


@router.post("/register", response_model=ProvisioningResponse, status_code=201)
@limiter.limit(auth_rate_limit)
async def register(
    request: Request,
    credentials: RegisterRequest,
    store: AccountStore = Depends(get_store),
    service: VerificationService = Depends(get_verification_service),
):
    """
    Register a new account and enroll it for TOTP.

    Generates a fresh shared secret, stores it together with the bcrypt hash
    of the password, and returns the provisioning URI and its QR code so the
    user can add the account to an authenticator app.

    Responses:
        201: Account created, provisioning data returned
        409: Username already taken
    """
    if await store.get_account(credentials.username):
        log.info(f"Registration for existing username '{credentials.username}' from {client_ip(request)}")
        return api_response(message="Username already exists", success=False, status_code=409)

    registration = service.register(credentials.username)
    try:
        await store.create_account(credentials.username, hash_password(credentials.password), registration.secret)
    except AccountExists:
        return api_response(message="Username already exists", success=False, status_code=409)

    log.info(f"Registered account '{credentials.username}' from {client_ip(request)}")
    return api_response(
        message="Account registered",
        data=_provisioning_data(credentials.username, registration),
        status_code=201
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit(auth_rate_limit)
async def login(
    request: Request,
    credentials: LoginRequest,
    store: AccountStore = Depends(get_store),
    service: VerificationService = Depends(get_verification_service),
):
    """
    Verify username, password and TOTP code.

    Unknown usernames, wrong passwords and wrong codes all get the same 401
    answer and count as a failed attempt for the client address.

    Responses:
        200: Authentication successful
        401: Authentication failed
        403: Account has no TOTP secret, enrollment required
    """
    outcome, rejection = await _check_credentials(request, credentials, store, service)
    if rejection is not None:
        return rejection

    await store.record_login(credentials.username)
    log.info(f"'{credentials.username}' successfully authenticated from {client_ip(request)}")
    return api_response(
        message="Login successful",
        data={"username": credentials.username, "outcome": outcome.value}
    )


@router.post("/reprovision", response_model=ProvisioningResponse)
@limiter.limit(auth_rate_limit)
async def reprovision(
    request: Request,
    credentials: LoginRequest,
    store: AccountStore = Depends(get_store),
    service: VerificationService = Depends(get_verification_service),
):
    """
    Replace the TOTP secret of an account.

    Requires the same proof as a login. The previous secret stops working as
    soon as the new one is stored.

    Responses:
        200: New secret stored, provisioning data returned
        401: Authentication failed
        403: Account has no TOTP secret
    """
    _, rejection = await _check_credentials(request, credentials, store, service)
    if rejection is not None:
        return rejection

    registration = service.register(credentials.username)
    await store.save_secret(credentials.username, registration.secret)

    log.info(f"Re-provisioned TOTP secret for '{credentials.username}' from {client_ip(request)}")
    return api_response(
        message="TOTP secret replaced",
        data=_provisioning_data(credentials.username, registration)
    )
