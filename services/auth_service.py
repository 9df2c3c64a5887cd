from typing import Any, Dict, Optional

from models.common_models import (
    AuthPayload,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserProfile,
)
from models.state_models import AuthState
from services.operation_service import Action, OperationContext, Slice
from services.session_service import SESSION_EXPIRED

auth_slice = Slice("auth", AuthState())


def _user_from(body: Dict[str, Any]) -> UserProfile:
    return UserProfile.model_validate(body.get("user", body))


def _login(ctx: OperationContext, req: LoginRequest) -> AuthPayload:
    auth = AuthPayload.model_validate(ctx.api.auth.login(req.email, req.password))
    ctx.session.set_token(auth.token)
    return auth


def _register(ctx: OperationContext, req: RegisterRequest) -> AuthPayload:
    auth = AuthPayload.model_validate(ctx.api.auth.register(req.username, req.email, req.password))
    ctx.session.set_token(auth.token)
    return auth


def _get_profile(ctx: OperationContext, _: Any = None) -> UserProfile:
    return _user_from(ctx.api.auth.get_profile())


def _update_profile(ctx: OperationContext, updates: ProfileUpdate) -> UserProfile:
    return _user_from(ctx.api.auth.update_profile(updates.username, updates.email))


def _change_password(ctx: OperationContext, req: PasswordChange) -> None:
    ctx.api.auth.change_password(req.current_password, req.new_password)


def _verify_token(ctx: OperationContext, _: Any = None) -> Optional[UserProfile]:
    body = ctx.api.auth.verify_token()
    return _user_from(body) if body.get("user") else None


def _set_session(state: AuthState, action: Action) -> None:
    state.user = action.payload.user
    state.token = action.payload.token


def _set_user(state: AuthState, action: Action) -> None:
    if action.payload is not None:
        state.user = action.payload


login = auth_slice.operation("login", _login, "Login failed", on_fulfilled=_set_session)
register = auth_slice.operation("register", _register, "Registration failed", on_fulfilled=_set_session)
get_profile = auth_slice.operation("get_profile", _get_profile, "Failed to fetch profile", on_fulfilled=_set_user)
update_profile = auth_slice.operation("update_profile", _update_profile, "Failed to update profile", on_fulfilled=_set_user)
change_password = auth_slice.operation("change_password", _change_password, "Failed to change password")
verify_token = auth_slice.operation("verify_token", _verify_token, "Session verification failed", on_fulfilled=_set_user)


@auth_slice.reducer
def restore_session(state: AuthState, action: Action) -> None:
    state.token = action.payload
    state.user = None


@auth_slice.reducer
def logout(state: AuthState, action: Action) -> None:
    state.user = None
    state.token = None
    state.error = None


@auth_slice.reducer
def clear_error(state: AuthState, action: Action) -> None:
    state.error = None


def _expire(state: AuthState, action: Action) -> None:
    state.user = None
    state.token = None


auth_slice.on(SESSION_EXPIRED, _expire)


def sign_out(store) -> None:
    """Drop the credential everywhere: session store, durable mirror, auth state."""
    store.context.session.clear()
    store.dispatch(logout())
