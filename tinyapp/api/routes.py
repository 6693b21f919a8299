"""
Web Routes for the TinyApp URL Shortener

This module defines the HTML routes with minimal logic.
Routes only handle:
- Reading form fields and the session identity
- Rate limiting
- Translating service exceptions into status codes and flash messages
- Delegating to the stores

Error translation:
- Owner routes: NotFoundError / ForbiddenError -> flash message, redirect to /urls
- Login/register: InvalidInputError / AlreadyExistsError -> 400,
  NotFoundError / UnauthorizedError -> 403
- Public redirect: unknown short code -> error page with 404
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from tinyapp.api.schemas import LinkStatsResponse
from tinyapp.api.session import (
    flash,
    get_current_user,
    get_link_store,
    get_user_directory,
    get_visitor_id,
    log_in,
    log_out,
    pop_flashes,
    require_user,
)
from tinyapp.core.exceptions import (
    AlreadyExistsError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ShortCodeExhaustedError,
    UnauthorizedError,
)
from tinyapp.core.rate_limit import RATE_LIMITS, limiter
from tinyapp.core.validators import is_blank, is_short_code
from tinyapp.models import User
from tinyapp.services.link_store import LinkStore
from tinyapp.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

MSG_NOT_FOUND = "Sorry, the requested TinyURL does not exist!"
MSG_NOT_OWNER = "Sorry, the requested TinyURL does not belong to you!"
MSG_UPDATE_FORBIDDEN = "Sorry, only the owner may update their TinyURLs!"
MSG_DELETE_FORBIDDEN = "Sorry, you may not delete a TinyURL that you do not own!"
MSG_EMPTY_URL = "Sorry, you must enter a URL!"


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def render(
    request: Request,
    name: str,
    user: Optional[User] = None,
    error: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    **context,
):
    """Render a template with the header context every page needs."""
    messages = pop_flashes(request)
    if error:
        messages.append(error)
    context.update(
        user=user,
        messages=messages,
        base_url=request.app.state.settings.BASE_URL,
    )
    return templates.TemplateResponse(request, name, context, status_code=status_code)


@router.get("/", include_in_schema=False)
async def home(user: Optional[User] = Depends(get_current_user)):
    if user:
        return redirect("/urls")
    return redirect("/login")


@router.get("/urls", include_in_schema=False)
async def list_urls(
    request: Request,
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
):
    """List the logged-in user's short URLs."""
    return render(request, "urls_index.html", user=user, links=links.list_by_owner(user.id))


@router.get("/urls/new", include_in_schema=False)
async def new_url_form(request: Request, user: User = Depends(require_user)):
    return render(request, "urls_new.html", user=user)


@router.post("/urls", include_in_schema=False)
@limiter.limit(RATE_LIMITS["create"])
async def create_url(
    request: Request,
    long_url: str = Form("", alias="inputLongURL"),
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
):
    """Create a short URL owned by the logged-in user and show it."""
    if is_blank(long_url):
        flash(request, MSG_EMPTY_URL)
        return redirect("/urls/new")
    
    try:
        link = links.create(long_url.strip(), user.id)
    except ShortCodeExhaustedError as e:
        logger.error(str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    
    logger.info(f"User {user.id} created short URL {link.id}")
    return redirect(f"/urls/{link.id}")


@router.get("/urls/{short_code}", include_in_schema=False)
async def show_url(
    short_code: str,
    request: Request,
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
):
    """Show one owned short URL with its edit form and visit history."""
    try:
        link = links.get_owned(short_code, user.id)
    except NotFoundError:
        flash(request, MSG_NOT_FOUND)
        return redirect("/urls")
    except ForbiddenError:
        flash(request, MSG_NOT_OWNER)
        return redirect("/urls")
    
    return render(request, "urls_show.html", user=user, link=link, visits=links.visits_for(short_code))


@router.post("/urls/{short_code}", include_in_schema=False)
async def update_url(
    short_code: str,
    request: Request,
    long_url: str = Form("", alias="inputLongURL"),
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
):
    """Point an owned short URL at a new long URL."""
    if is_blank(long_url):
        flash(request, MSG_EMPTY_URL)
        return redirect(f"/urls/{short_code}")
    
    try:
        links.update(short_code, user.id, long_url.strip())
    except NotFoundError:
        flash(request, MSG_NOT_FOUND)
    except ForbiddenError:
        logger.warning(f"User {user.id} tried to update short URL {short_code} they do not own")
        flash(request, MSG_UPDATE_FORBIDDEN)
    
    return redirect("/urls")


@router.post("/urls/{short_code}/delete", include_in_schema=False)
async def delete_url(
    short_code: str,
    request: Request,
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
):
    """Delete an owned short URL."""
    try:
        links.delete(short_code, user.id)
        logger.info(f"User {user.id} deleted short URL {short_code}")
    except NotFoundError:
        flash(request, MSG_NOT_FOUND)
    except ForbiddenError:
        logger.warning(f"User {user.id} tried to delete short URL {short_code} they do not own")
        flash(request, MSG_DELETE_FORBIDDEN)
    
    return redirect("/urls")


@router.get(
    "/urls/{short_code}/stats",
    response_model=LinkStatsResponse,
    summary="Get short URL statistics",
    description="Returns visit statistics and history for a short URL owned by the caller"
)
async def url_stats(
    short_code: str,
    request: Request,
    user: User = Depends(require_user),
    links: LinkStore = Depends(get_link_store),
) -> LinkStatsResponse:
    """
    Get statistics for an owned short URL.
    
    Raises:
        HTTPException 404: If short code not found
        HTTPException 403: If the caller does not own the short URL
    """
    try:
        link = links.get_owned(short_code, user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ForbiddenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    
    return LinkStatsResponse.from_link(
        link,
        links.visits_for(short_code),
        request.app.state.settings.BASE_URL,
    )


@router.get("/u/{short_code}", include_in_schema=False)
@limiter.limit(RATE_LIMITS["redirect"])
async def follow_short_url(
    short_code: str,
    request: Request,
    visitor_id: str = Depends(get_visitor_id),
    links: LinkStore = Depends(get_link_store),
):
    """
    Redirect to the long URL for a short code, recording the visit.
    
    This is the only route that does not require a logged-in user.
    """
    if not is_short_code(short_code):
        return render(
            request,
            "error.html",
            error=f"Invalid short URL '{short_code}'. Short URLs contain only letters and digits.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    
    try:
        long_url = links.resolve_visit(short_code, visitor_id)
    except NotFoundError:
        return render(
            request,
            "error.html",
            error="Sorry, the requested TinyURL does not exist in the system!",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)


@router.get("/login", include_in_schema=False)
async def login_form(request: Request, user: Optional[User] = Depends(get_current_user)):
    if user:
        return redirect("/urls")
    return render(request, "login.html")


@router.post("/login", include_in_schema=False)
@limiter.limit(RATE_LIMITS["login"])
def login(
    request: Request,
    email: str = Form("", alias="inputEmail"),
    password: str = Form("", alias="inputPassword"),
    users: UserDirectory = Depends(get_user_directory),
):
    """
    Log in with email and password.
    
    Plain def: bcrypt runs in the threadpool, not on the event loop.
    """
    try:
        user = users.authenticate(email, password)
    except InvalidInputError:
        return render(
            request,
            "login.html",
            error="Sorry, you must enter an email address and password to login!",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except NotFoundError:
        logger.warning(f"Login attempt for unknown user {email!r}")
        return render(
            request,
            "login.html",
            error="Sorry, this user does not exist!",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    except UnauthorizedError:
        logger.warning(f"Failed login for {email!r}")
        return render(
            request,
            "login.html",
            error="Sorry, email and password do not match!",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    
    log_in(request, user)
    return redirect("/urls")


@router.get("/register", include_in_schema=False)
async def register_form(request: Request, user: Optional[User] = Depends(get_current_user)):
    if user:
        return redirect("/urls")
    return render(request, "register.html")


@router.post("/register", include_in_schema=False)
@limiter.limit(RATE_LIMITS["register"])
def register(
    request: Request,
    email: str = Form("", alias="inputEmail"),
    password: str = Form("", alias="inputPassword"),
    users: UserDirectory = Depends(get_user_directory),
):
    """
    Create an account and log it in.
    
    Plain def: bcrypt runs in the threadpool, not on the event loop.
    """
    try:
        user = users.register(email, password)
    except InvalidInputError as e:
        return render(
            request,
            "register.html",
            error=f"Sorry, you must enter a valid email address and password to register ({e}).",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except AlreadyExistsError:
        return render(
            request,
            "register.html",
            error="Sorry, this user already exists!",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    
    logger.info(f"Registered user {user.id}")
    log_in(request, user)
    return redirect("/urls")


@router.api_route("/logout", methods=["GET", "POST"], include_in_schema=False)
async def logout(request: Request):
    log_out(request)
    return redirect("/urls")
