"""Routes, selectors and notification strings of the blog UI.

The journeys only pass when these stay stable in the application's templates.
"""
from __future__ import annotations

from blog_journeys.browser import Target

# ============================================================================
# Routes
# ============================================================================

ROOT = "/"
SETTINGS = "/users/settings"
POST_PATTERN = r"/posts/(\d+)"


def update_post_path(post_id: int) -> str:
    return f"/posts/update/{post_id}"


def delete_post_path(post_id: int) -> str:
    return f"/posts/delete/{post_id}"


def update_comment_path(comment_id: int) -> str:
    return f"/comments/update/{comment_id}"


def delete_comment_path(comment_id: int) -> str:
    return f"/comments/delete/{comment_id}"


# ============================================================================
# Notifications (flash messages rendered by the application)
# ============================================================================

class Notifications:
    USER_CREATED = "Created user. you can now login!"
    USER_UPDATED = "Updated user data"
    PASSWORD_CHANGED = "Change user password completed!"
    PICTURE_UPLOADED = "Profile picture uploaded"
    POST_CREATED = "Created post!"
    POST_UPDATED = "Post updated"
    POST_DELETED = "Post deleted"
    COMMENT_CREATED = "Created comment!"
    COMMENT_UPDATED = "comment updated"
    COMMENT_DELETED = "comment deleted"
    NOT_POST_OWNER = "User does not own post"
    NOT_COMMENT_OWNER = "Error : User does not own comment"
    LOGGED_OUT = "Logout Successfully!"
    INVALID_LOGIN = "Invalid login"


# ============================================================================
# Shared layout
# ============================================================================

NAVBAR = Target.css("#navbarSupportedContent")
_NAV_MENU = "#navbarSupportedContent > ul.navbar-nav.mr-auto.mb-2.mb-lg-0"
# Logged out: Register / Login. Logged in: Posts / User.
NAV_FIRST_LINK = Target.css(f"{_NAV_MENU} > li:nth-child(1) > a")
NAV_SECOND_LINK = Target.css(f"{_NAV_MENU} > li:nth-child(2) > a")
NAV_LOGIN_LINK = Target.role("link", "Login", within=NAVBAR)
POST_MENU = Target.css("#post_menu > a")
LOGOUT_BUTTON = Target.css("#btn-logout")

NOTIFICATION = Target.css("#notification > div > p")
ALERT = Target.role("alert")
HEADING = Target.role("heading")
BODY = Target.css("body")

# ============================================================================
# Registration form
# ============================================================================

_REGISTER_FORM = "body > div > div.row.mt-5 > div.col-6 > form"
REGISTER_NAME = Target.css("#inputName")
REGISTER_EMAIL = Target.css("#inputEmail")
REGISTER_PASSWORD = Target.css("#inputPassword")
REGISTER_TERMS = Target.css(f"{_REGISTER_FORM} > div > label > input[type=checkbox]")
REGISTER_SUBMIT = Target.css(f"{_REGISTER_FORM} > button")

# ============================================================================
# Login form
# ============================================================================

LOGIN_EMAIL = Target.role("textbox", "Email address")
LOGIN_PASSWORD = Target.role("textbox", "Password")
SIGN_IN_BUTTON = Target.role("button", "Sign in")

# ============================================================================
# Posts and comments
# ============================================================================

POST_TITLE = Target.role("textbox", "Post title")
POST_BODY = Target.role("textbox", "post body")
CREATE_POST_BUTTON = Target.role("button", "Create")
# submit button of both edit forms (posts and comments)
UPDATE_BUTTON = Target.role("button", "Update")
CREATE_POST_HEADING = "Create new post"

COMMENT_INPUT = Target.placeholder("New comment")
COMMENT_BUTTON = Target.role("button", "Comment")
FIRST_COMMENT = Target.css('//*[@id="comments"]/div[1]/div[1]/p')


def delete_post_button(post_id: int) -> Target:
    return Target.css(f'form[action="{delete_post_path(post_id)}"] button')


def comment_body_input(comment_id: int) -> Target:
    return Target.css(f'form[action="{update_comment_path(comment_id)}"] [name="body"]')


def delete_comment_button(comment_id: int) -> Target:
    return Target.css(f'form[action="{delete_comment_path(comment_id)}"] button')


# ============================================================================
# User settings page
# ============================================================================

_PROFILE_FORM = "body > div > div.row.my-5 > div.col-6.mb-5 > form:nth-child(3)"
SETTINGS_NAME = Target.role("textbox", "Name")
SETTINGS_SAVE = Target.role("button", "Save")
SETTINGS_DISPLAY_NAME = Target.css(f"{_PROFILE_FORM} > div.my-2 > h3")
PROFILE_IMAGE = Target.css(f"{_PROFILE_FORM} > div.my-2.flex.flex-col.justify-center > img")
PROFILE_PICTURE_INPUT = Target.role("button", "Profile picture")
UPLOAD_BUTTON = Target.role("button", "Upload")
CURRENT_PASSWORD = Target.css("#current_password")
NEW_PASSWORD = Target.css("#new_password")
CONFIRM_PASSWORD = Target.css("#confirm_password")
SUBMIT_CHANGE_PASSWORD = Target.css("#submit-change-password")
