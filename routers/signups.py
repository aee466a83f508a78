import asyncio
import weakref

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import logger, DISCOUNT_CODE, EMAIL_LISTING_ENABLED, FAIL_ON_WRITE_ERROR
from core.errors import GENERIC_ERROR_MESSAGE, SignupError, ValidationError, DuplicateError, PersistenceError
from models.signups import (
    DISCOUNT_SOURCE,
    NEWSLETTER_SOURCE,
    DiscountRecord,
    EmailStoreDocument,
    SignupPayload,
    SignupRecord,
)
from utils.email_store import email_store
from utils.validation import validate_email


router = APIRouter(prefix="/api", tags=["signups"])  # e.g. POST /api/newsletter

NEWSLETTER_SUCCESS_MESSAGE = "Thank you for subscribing! We'll be in touch soon."
NEWSLETTER_DUPLICATE_MESSAGE = "This email is already subscribed to our newsletter"
DISCOUNT_DUPLICATE_MESSAGE = "This email has already been used for the discount"
LISTING_ERROR_MESSAGE = "Error retrieving emails"

# Serializes read-modify-write within this process; other processes are not covered.
# Keyed by event loop, an asyncio.Lock is bound to the loop it first waits on
_store_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def _get_store_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _store_locks.get(loop)
    if lock is None:
        lock = _store_locks[loop] = asyncio.Lock()
    return lock


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


def _require_email(value) -> str:
    ok, message = validate_email(value)
    if not ok:
        raise ValidationError(message)
    return value


async def _persist(emails: EmailStoreDocument) -> None:
    if await email_store.write_all(emails):
        return
    if FAIL_ON_WRITE_ERROR:
        raise PersistenceError()
    logger.warning("Signup accepted but the email store was not updated")


def discount_message(code: str) -> str:
    return f"Thanks! Your 10% discount code is: {code}"


@router.post("/newsletter")
async def newsletter_signup(payload: SignupPayload):
    try:
        email = _require_email(payload.email)

        async with _get_store_lock():
            emails = await email_store.read_all()
            if emails.has_newsletter_email(email):
                raise DuplicateError(NEWSLETTER_DUPLICATE_MESSAGE)

            emails.add_newsletter(SignupRecord(email=email, source=NEWSLETTER_SOURCE))
            await _persist(emails)

        logger.info(f"Newsletter signup: {email}")
        return {"success": True, "message": NEWSLETTER_SUCCESS_MESSAGE}
    except SignupError:
        raise
    except Exception as ex:
        logger.exception(f"Newsletter signup error: {ex}")
        return _error_response(GENERIC_ERROR_MESSAGE, 500)


@router.post("/discount")
async def discount_signup(payload: SignupPayload):
    try:
        email = _require_email(payload.email)
        code = DISCOUNT_CODE

        async with _get_store_lock():
            emails = await email_store.read_all()
            if emails.has_discount_email(email):
                raise DuplicateError(DISCOUNT_DUPLICATE_MESSAGE)

            emails.add_discount(DiscountRecord(email=email, source=DISCOUNT_SOURCE, discountCode=code))
            await _persist(emails)

        logger.info(f"Discount signup: {email}")
        return {"success": True, "message": discount_message(code), "discountCode": code}
    except SignupError:
        raise
    except Exception as ex:
        logger.exception(f"Discount signup error: {ex}")
        return _error_response(GENERIC_ERROR_MESSAGE, 500)


@router.get("/emails")
async def list_emails():
    # Admin listing, intentionally unauthenticated
    if not EMAIL_LISTING_ENABLED:
        return _error_response("Not found", 404)
    try:
        emails = await email_store.read_all()
        data = emails.to_json_dict()
        return {
            "success": True,
            "data": {
                "newsletter_count": len(data["newsletter"]),
                "discount_count": len(data["discount"]),
                "newsletter": data["newsletter"],
                "discount": data["discount"],
            },
        }
    except Exception as ex:
        logger.exception(f"Get emails error: {ex}")
        return _error_response(LISTING_ERROR_MESSAGE, 500)


@router.get("/health")
async def health():
    return {"success": True, "message": "Server is running"}
