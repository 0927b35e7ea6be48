from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from store_sales.core.auth import SessionProvider, dashboard_auth_enabled, verify_dashboard_credentials
from store_sales.core.constants import DEFAULT_DASHBOARD_PATH, LOGIN_PATH
from store_sales.core.templating import render

router = APIRouter(tags=["Auth"])


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return render(request, "login.html", {"error": None})


@router.post("/login", response_class=HTMLResponse)
def login_submit(request: Request, username: str = Form(...), password: str = Form(...)):
    if not dashboard_auth_enabled():
        return render(
            request,
            "login.html",
            {"error": "Login is not configured. Set dashboard credentials in the environment."},
            status_code=400,
        )

    try:
        if verify_dashboard_credentials(username, password):
            SessionProvider(request).sign_in(username.strip())
            return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=303)
    except ValueError as exc:
        error_message = str(exc)
    else:
        error_message = "Invalid login ID or password."

    return render(request, "login.html", {"error": error_message}, status_code=401)


@router.post("/logout")
def logout(request: Request):
    SessionProvider(request).sign_out()
    return RedirectResponse(url=LOGIN_PATH, status_code=303)
