"""Workflow action sequences, recorded by the fake browser."""
import pytest

from blog_journeys import ui_contract as ui
from blog_journeys import workflows
from blog_journeys.config import settings
from blog_journeys.errors import UiAssertionError
from blog_journeys.identity import SessionArtifact, cached_identity
from blog_journeys.state import ResourceAddress
from blog_journeys.workflows import AccountOptions

pytestmark = pytest.mark.asyncio

CREDENTIALS = SessionArtifact("usertestabc@example.com", "usertestabc-password", "usertestabc")
POST = ResourceAddress("http://localhost:3000/posts/17")


def _registration_succeeds(browser):
    browser.texts[ui.NOTIFICATION] = ui.Notifications.USER_CREATED


async def test_create_account_fills_registration_form(fake_browser):
    fake_browser.on_click[ui.REGISTER_SUBMIT] = _registration_succeeds

    artifact = await workflows.create_account(fake_browser)

    assert fake_browser.actions[0] == ("goto", settings.url("/"))
    assert fake_browser.clicked() == [ui.NAV_FIRST_LINK, ui.REGISTER_TERMS, ui.REGISTER_SUBMIT]
    assert fake_browser.filled() == {
        ui.REGISTER_NAME: artifact.full_name,
        ui.REGISTER_EMAIL: artifact.email,
        ui.REGISTER_PASSWORD: artifact.password,
    }
    assert artifact.email == f"{artifact.full_name}@{settings.email_domain}"
    assert artifact.password == f"{artifact.full_name}-password"


async def test_create_account_generates_distinct_identities(fake_browser):
    fake_browser.on_click[ui.REGISTER_SUBMIT] = _registration_succeeds

    first = await workflows.create_account(fake_browser)
    second = await workflows.create_account(fake_browser)

    assert first.email != second.email


async def test_create_account_can_reuse_cached_identity(fake_browser):
    fake_browser.on_click[ui.REGISTER_SUBMIT] = _registration_succeeds

    artifact = await workflows.create_account(fake_browser, AccountOptions(reuse_cached_identity=True))

    assert artifact == cached_identity().session_artifact()


async def test_create_account_fails_on_wrong_notification(fake_browser):
    fake_browser.texts[ui.NOTIFICATION] = "Email already taken"

    with pytest.raises(UiAssertionError) as excinfo:
        await workflows.create_account(fake_browser)

    assert excinfo.value.step == "create account"
    assert excinfo.value.observed == "Email already taken"


async def test_create_account_without_notification_check(fake_browser):
    fake_browser.texts[ui.NOTIFICATION] = "Email already taken"

    artifact = await workflows.create_account(
        fake_browser, AccountOptions(assert_success_notification=False)
    )

    assert artifact.full_name.startswith(settings.identity_prefix)


async def test_login_uses_given_credentials(fake_browser):
    await workflows.login(fake_browser, CREDENTIALS)

    assert fake_browser.actions[0] == ("goto", settings.url("/"))
    assert fake_browser.clicked() == [ui.NAV_LOGIN_LINK, ui.SIGN_IN_BUTTON]
    assert fake_browser.filled() == {
        ui.LOGIN_EMAIL: CREDENTIALS.email,
        ui.LOGIN_PASSWORD: CREDENTIALS.password,
    }
    assert fake_browser.actions[-1] == ("wait_for_load_state", "domcontentloaded")


async def test_logout_clicks_logout_button(fake_browser):
    await workflows.logout(fake_browser)

    assert fake_browser.clicked() == [ui.LOGOUT_BUTTON]


async def test_submit_post(fake_browser):
    await workflows.open_create_post_form(fake_browser)
    await workflows.submit_post(fake_browser, "title", "body")

    assert fake_browser.clicked() == [ui.POST_MENU, ui.CREATE_POST_BUTTON]
    assert fake_browser.filled() == {ui.POST_TITLE: "title", ui.POST_BODY: "body"}


async def test_add_comment_opens_post_first(fake_browser):
    await workflows.add_comment(fake_browser, POST, "nice post")

    assert fake_browser.actions[0] == ("goto", POST.url)
    assert fake_browser.filled() == {ui.COMMENT_INPUT: "nice post"}
    assert fake_browser.clicked() == [ui.COMMENT_BUTTON]


async def test_update_post_goes_to_edit_form(fake_browser):
    await workflows.update_post(fake_browser, POST, "new title", "new body")

    assert fake_browser.actions[0] == ("goto", settings.url("/posts/update/17"))
    assert fake_browser.filled() == {ui.POST_TITLE: "new title", ui.POST_BODY: "new body"}
    assert fake_browser.clicked() == [ui.UPDATE_BUTTON]


async def test_delete_post_submits_delete_form(fake_browser):
    await workflows.delete_post(fake_browser, POST)

    assert fake_browser.actions[0] == ("goto", POST.url)
    assert fake_browser.clicked() == [ui.delete_post_button(17)]
    assert ui.delete_post_button(17).value == 'form[action="/posts/delete/17"] button'


async def test_update_display_name(fake_browser):
    await workflows.update_display_name(fake_browser, "renamed")

    assert fake_browser.actions[0] == ("goto", settings.url("/users/settings"))
    assert fake_browser.filled() == {ui.SETTINGS_NAME: "renamed"}
    assert fake_browser.clicked() == [ui.SETTINGS_SAVE]


async def test_upload_profile_picture(fake_browser, tmp_path):
    picture = tmp_path / "me.jpg"

    await workflows.upload_profile_picture(fake_browser, picture)

    assert fake_browser.actions[0] == ("set_input_files", ui.PROFILE_PICTURE_INPUT, str(picture))
    assert fake_browser.clicked() == [ui.UPLOAD_BUTTON]


async def test_change_password_returns_updated_credentials(fake_browser):
    updated = await workflows.change_password(fake_browser, CREDENTIALS, "brand-new")

    assert fake_browser.filled() == {
        ui.CURRENT_PASSWORD: CREDENTIALS.password,
        ui.NEW_PASSWORD: "brand-new",
        ui.CONFIRM_PASSWORD: "brand-new",
    }
    assert fake_browser.clicked() == [ui.SUBMIT_CHANGE_PASSWORD]
    assert updated == CREDENTIALS.with_password("brand-new")


COMMENT = ResourceAddress("http://localhost:3000/posts/17?page=1&per_page=10#42")


async def test_update_comment_goes_to_comment_edit_form(fake_browser):
    await workflows.update_comment(fake_browser, COMMENT, "edited")

    assert fake_browser.actions[0] == ("goto", settings.url("/comments/update/42"))
    assert fake_browser.filled() == {ui.comment_body_input(42): "edited"}
    assert fake_browser.clicked() == [ui.UPDATE_BUTTON]
    assert ui.comment_body_input(42).value == 'form[action="/comments/update/42"] [name="body"]'


async def test_delete_comment_submits_delete_form_on_post_page(fake_browser):
    await workflows.delete_comment(fake_browser, COMMENT)

    assert fake_browser.actions[0] == ("goto", COMMENT.url)
    assert fake_browser.clicked() == [ui.delete_comment_button(42)]
    assert ui.delete_comment_button(42).value == 'form[action="/comments/delete/42"] button'


async def test_comment_workflows_need_a_comment_address(fake_browser):
    with pytest.raises(ValueError):
        await workflows.update_comment(fake_browser, POST, "edited")

    assert fake_browser.actions == []
