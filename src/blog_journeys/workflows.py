"""Reusable workflows for the blog UI journeys.

``create_account`` and ``login`` are the precondition fixtures every suite
builds on. The remaining functions perform one user-visible action each and
leave the post-condition checks to the calling test.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from blog_journeys import ui_contract as ui
from blog_journeys.assertions import expect_text
from blog_journeys.browser import Browser
from blog_journeys.config import settings
from blog_journeys.identity import SessionArtifact, cached_identity, generate_identity
from blog_journeys.state import ResourceAddress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountOptions:
    """How ``create_account`` picks its identity and whether it checks the outcome.

    reuse_cached_identity: register the process-wide identity from
        ``cached_identity()`` instead of a fresh one.
    assert_success_notification: fail unless the registration notification
        reads exactly "Created user. you can now login!".
    """

    reuse_cached_identity: bool = False
    assert_success_notification: bool = True


DEFAULT_ACCOUNT_OPTIONS = AccountOptions()


# ============================================================================
# Precondition fixtures
# ============================================================================

async def create_account(
    browser: Browser,
    options: AccountOptions = DEFAULT_ACCOUNT_OPTIONS,
) -> SessionArtifact:
    """Register a new account through the UI and return its credentials.

    A mismatching notification means either a UI regression or a collision
    with an account registered earlier; neither is retried.
    """
    identity = cached_identity() if options.reuse_cached_identity else generate_identity()
    logger.info("Registering account %s", identity.email)

    await browser.goto(settings.url(ui.ROOT))
    await browser.click(ui.NAV_FIRST_LINK)

    await browser.fill(ui.REGISTER_NAME, identity.full_name)
    await browser.fill(ui.REGISTER_EMAIL, identity.email)
    await browser.fill(ui.REGISTER_PASSWORD, identity.password)
    await browser.click(ui.REGISTER_TERMS)
    await browser.click(ui.REGISTER_SUBMIT)

    if options.assert_success_notification:
        await expect_text(
            browser,
            ui.NOTIFICATION,
            ui.Notifications.USER_CREATED,
            step="create account",
        )

    return identity.session_artifact()


async def login(browser: Browser, credentials: SessionArtifact) -> None:
    """Submit the login form with ``credentials``.

    Success is not checked here: a plain login and a login after a password
    change expect different outcomes, so callers assert the result.
    """
    logger.info("Logging in as %s", credentials.email)

    await browser.goto(settings.url(ui.ROOT))
    await browser.click(ui.NAV_LOGIN_LINK)

    await browser.fill(ui.LOGIN_EMAIL, credentials.email)
    await browser.fill(ui.LOGIN_PASSWORD, credentials.password)
    await browser.click(ui.SIGN_IN_BUTTON)

    await browser.wait_for_load_state("domcontentloaded")


async def logout(browser: Browser) -> None:
    await browser.click(ui.LOGOUT_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


# ============================================================================
# Posts and comments
# ============================================================================

async def open_create_post_form(browser: Browser) -> None:
    await browser.click(ui.POST_MENU)
    await browser.wait_for_load_state("domcontentloaded")


async def submit_post(browser: Browser, title: str, body: str) -> None:
    await browser.fill(ui.POST_TITLE, title)
    await browser.fill(ui.POST_BODY, body)
    await browser.click(ui.CREATE_POST_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


async def open_resource(browser: Browser, address: ResourceAddress) -> None:
    await browser.goto(address.url)
    await browser.wait_for_load_state("domcontentloaded")


async def add_comment(browser: Browser, address: ResourceAddress, text: str) -> None:
    """Open the post at ``address`` and submit ``text`` as a comment."""
    await open_resource(browser, address)
    await browser.fill(ui.COMMENT_INPUT, text)
    await browser.click(ui.COMMENT_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


async def update_post(browser: Browser, address: ResourceAddress, title: str, body: str) -> None:
    await browser.goto(settings.url(ui.update_post_path(address.post_id)))
    await browser.fill(ui.POST_TITLE, title)
    await browser.fill(ui.POST_BODY, body)
    await browser.click(ui.UPDATE_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


async def delete_post(browser: Browser, address: ResourceAddress) -> None:
    await open_resource(browser, address)
    await browser.click(ui.delete_post_button(address.post_id))
    await browser.wait_for_load_state("domcontentloaded")


async def update_comment(browser: Browser, address: ResourceAddress, text: str) -> None:
    """Replace the body of the comment at ``address`` through its edit form."""
    await browser.goto(settings.url(ui.update_comment_path(address.comment_id)))
    await browser.fill(ui.comment_body_input(address.comment_id), text)
    await browser.click(ui.UPDATE_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


async def delete_comment(browser: Browser, address: ResourceAddress) -> None:
    await open_resource(browser, address)
    await browser.click(ui.delete_comment_button(address.comment_id))
    await browser.wait_for_load_state("domcontentloaded")


# ============================================================================
# User settings
# ============================================================================

async def open_settings(browser: Browser) -> None:
    await browser.goto(settings.url(ui.SETTINGS))
    await browser.wait_for_load_state("domcontentloaded")


async def update_display_name(browser: Browser, name: str) -> None:
    await open_settings(browser)
    await browser.fill(ui.SETTINGS_NAME, name)
    await browser.click(ui.SETTINGS_SAVE)
    await browser.wait_for_load_state("domcontentloaded")


async def upload_profile_picture(browser: Browser, picture: str | Path) -> None:
    """Upload ``picture`` from the settings page (which must already be open)."""
    await browser.set_input_files(ui.PROFILE_PICTURE_INPUT, picture)
    await browser.click(ui.UPLOAD_BUTTON)
    await browser.wait_for_load_state("domcontentloaded")


async def change_password(browser: Browser, credentials: SessionArtifact, new_password: str) -> SessionArtifact:
    """Change the password from the settings page; returns the updated credentials."""
    await open_settings(browser)
    await browser.fill(ui.CURRENT_PASSWORD, credentials.password)
    await browser.fill(ui.NEW_PASSWORD, new_password)
    await browser.fill(ui.CONFIRM_PASSWORD, new_password)
    await browser.click(ui.SUBMIT_CHANGE_PASSWORD)
    await browser.wait_for_load_state("domcontentloaded")
    return credentials.with_password(new_password)
