"""Page objects driven against the in-memory page."""

import pytest

from testsuites.ui_testing.framework.config_loader import UISettings
from testsuites.ui_testing.framework.page_flow import FlowState
from testsuites.ui_testing.pages import (
    EditProfilePage,
    HomePage,
    LoginPage,
    LogoutPage,
    PinPage,
    SearchPage,
    SignupPage,
)
from testsuites.ui_testing.pages.common_locators import PIN_ITEMS, SEARCH_BOX
from testsuites.unit.fakes import FakeClock, FakePage, selector_of


SETTINGS = UISettings(
    explicit_wait=2,
    locator_timeout=0.5,
    poll_interval=0.5,
    home_urls=("https://www.pinterest.com/", "https://in.pinterest.com/"),
)


@pytest.fixture
def page():
    return FakePage(FakeClock(), url="https://www.pinterest.com/")


def make(page_class, page):
    return page_class(page, SETTINGS, clock=page.clock)


def sign_in(page):
    return lambda: page.add(selector_of(SEARCH_BOX))


class TestLoginPage:
    def test_login_confirmed_by_search_box(self, page):
        email = page.add(selector_of(LoginPage.EMAIL_INPUT))
        password = page.add(selector_of(LoginPage.PASSWORD_INPUT))
        page.add(selector_of(LoginPage.SUBMIT_BUTTON), on_click=sign_in(page))
        login = make(LoginPage, page)

        result = login.login("qa@example.com", "Secret#1")

        assert result.confirmed
        assert result.history[1:] == [
            FlowState.FIELD_INTERACTION,
            FlowState.FIELD_INTERACTION,
            FlowState.SUBMITTING,
            FlowState.CONFIRMED,
        ]
        assert email.value == "qa@example.com"
        assert password.value == "Secret#1"
        assert login.is_logged_in(timeout=0.5)

    def test_login_error_is_also_a_confirmation(self, page):
        page.add(selector_of(LoginPage.EMAIL_INPUT))
        page.add(selector_of(LoginPage.PASSWORD_INPUT))
        page.add(
            selector_of(LoginPage.SUBMIT_BUTTON),
            on_click=lambda: page.add(
                selector_of(LoginPage.PASSWORD_ERROR),
                text="The password you entered is incorrect. Reset it?",
            ),
        )
        login = make(LoginPage, page)

        result = login.login("qa@example.com", "wrong")

        assert result.confirmed
        assert "incorrect" in login.password_error_text(timeout=0.5)
        assert not login.is_logged_in(timeout=0.5)

    def test_empty_email_leaves_field_untouched(self, page):
        email = page.add(selector_of(LoginPage.EMAIL_INPUT))
        page.add(selector_of(LoginPage.PASSWORD_INPUT))
        page.add(selector_of(LoginPage.SUBMIT_BUTTON))
        login = make(LoginPage, page)

        with pytest.warns(UserWarning):
            result = login.login("", "Secret#1")

        assert email.fills == []
        assert result.state is FlowState.UNCONFIRMED

    def test_header_button_opens_form(self, page):
        form_field = selector_of(LoginPage.EMAIL_INPUT)
        button = page.add(
            selector_of(LoginPage.HEADER_BUTTON),
            text="Log in",
            on_click=lambda: page.add(form_field),
        )
        login = make(LoginPage, page)

        assert login.click_login_button()
        assert button.clicks == 1

    def test_header_button_with_other_label_is_not_clicked(self, page):
        button = page.add(selector_of(LoginPage.HEADER_BUTTON), text="Sign up")
        login = make(LoginPage, page)

        assert not login.click_login_button()
        assert button.clicks == 0


class TestSignupPage:
    def test_signup_fills_all_fields(self, page):
        fields = [
            page.add(selector_of(SignupPage.EMAIL_INPUT)),
            page.add(selector_of(SignupPage.PASSWORD_INPUT)),
            page.add(selector_of(SignupPage.BIRTHDATE_INPUT)),
        ]
        page.add(selector_of(SignupPage.CONTINUE_BUTTON), on_click=sign_in(page))
        signup = make(SignupPage, page)

        result = signup.signup("new@example.com", "Signup#1", "1995-06-15")

        assert result.confirmed
        assert [f.value for f in fields] == ["new@example.com", "Signup#1", "1995-06-15"]

    def test_field_errors(self, page):
        page.add(selector_of(SignupPage.EMAIL_ERROR), text="Hmm...that doesn't look like an email address.")
        page.add(selector_of(SignupPage.BIRTHDATE_ERROR), text="Oops! Please use a valid age to sign up.")
        signup = make(SignupPage, page)

        assert signup.email_error_text(timeout=0.5) == "Hmm...that doesn't look like an email address."
        assert signup.birthdate_error_text(timeout=0.5) == "Oops! Please use a valid age to sign up."
        assert signup.password_error_text(timeout=0.5) == ""


class TestLogoutPage:
    def test_logout_confirmed_by_home_url(self, page):
        page.add(
            selector_of(LogoutPage.ACCOUNT_DROPDOWN),
            on_click=lambda: page.add(
                selector_of(LogoutPage.LOGOUT_BUTTON),
                on_click=lambda: setattr(page, "url", "https://in.pinterest.com/"),
            ),
        )
        page.url = "https://www.pinterest.com/homefeed/"
        logout = make(LogoutPage, page)

        result = logout.logout()

        assert result.confirmed
        assert logout.is_logout_successful()

    def test_login_url_counts_as_logged_out(self, page):
        page.url = "https://www.pinterest.com/login/?next=/"
        assert make(LogoutPage, page).is_logout_successful()


class TestSearchPage:
    def test_search_confirmed_by_results_url(self, page):
        box = page.add(
            selector_of(SEARCH_BOX),
            on_key=lambda key: key == "Enter" and setattr(
                page, "url", "https://www.pinterest.com/search/pins/?q=home%20decor"
            ),
        )
        search = make(SearchPage, page)

        result = search.search("home decor")

        assert result.confirmed
        assert box.value == "home decor"
        assert search.is_search_results_page_loaded()
        assert search.is_search_attempted()

    def test_pins_and_out_of_range(self, page):
        for _ in range(3):
            page.add(selector_of(PIN_ITEMS))
        search = make(SearchPage, page)

        assert search.pin_count() == 3
        with pytest.raises(IndexError):
            search.open_pin(5)

    def test_open_pin_clicks_nth_match(self, page):
        pins = [page.add(selector_of(PIN_ITEMS)) for _ in range(3)]
        search = make(SearchPage, page)

        search.open_pin(1)

        assert [p.clicks for p in pins] == [0, 1, 0]

    def test_handled_gracefully_with_no_results_notice(self, page):
        page.add(selector_of(SearchPage.NO_RESULTS), text="No results for @@##$$")
        search = make(SearchPage, page)

        assert search.is_search_handled_gracefully()

    def test_search_not_attempted_on_start_page(self, page):
        assert not make(SearchPage, page).is_search_attempted()


class TestPinPage:
    def _grid(self, page, count=2):
        return [page.add(selector_of(PIN_ITEMS)) for _ in range(count)]

    def test_save_without_board_picker(self, page):
        self._grid(page)
        save = page.add(selector_of(PinPage.SAVE_BUTTON))
        pin = make(PinPage, page)

        result = pin.save_first_pin()

        assert result.confirmed
        assert not result.destination_selected
        assert save.clicks == 1
        assert pin.is_pin_save_successful()

    def test_save_with_board_picker(self, page):
        self._grid(page)
        modal = page.add(selector_of(PinPage.BOARD_MODAL), visible=False)
        page.add(selector_of(PinPage.SAVE_BUTTON), on_click=lambda: setattr(modal, "visible", True))
        board = page.add(
            selector_of(PinPage.FIRST_BOARD),
            on_click=lambda: setattr(modal, "visible", False),
        )
        pin = make(PinPage, page)

        result = pin.save_first_pin()

        assert result.confirmed
        assert result.destination_selected
        assert FlowState.DESTINATION_SELECTION in result.history
        assert board.clicks == 1

    def test_unknown_board_falls_back_to_first(self, page):
        self._grid(page)
        modal = page.add(selector_of(PinPage.BOARD_MODAL), visible=False)
        page.add(selector_of(PinPage.SAVE_BUTTON), on_click=lambda: setattr(modal, "visible", True))
        first = page.add(
            selector_of(PinPage.FIRST_BOARD),
            on_click=lambda: setattr(modal, "visible", False),
        )
        pin = make(PinPage, page)

        result = pin.save_first_pin_to_board("Travel Ideas")

        assert result.confirmed
        assert first.clicks == 1

    def test_save_pin_by_index_out_of_range(self, page):
        self._grid(page, count=1)

        with pytest.raises(IndexError):
            make(PinPage, page).save_pin_by_index(3)


class TestEditProfilePage:
    def test_update_profile(self, page):
        page.add(selector_of(EditProfilePage.AVATAR))
        page.add(selector_of(EditProfilePage.PROFILE_CARD))
        page.add(selector_of(EditProfilePage.EDIT_PROFILE_LINK))
        first = page.add(selector_of(EditProfilePage.FIRST_NAME), value="Old")
        about = page.add(selector_of(EditProfilePage.ABOUT), value="Old bio")
        page.add(
            selector_of(EditProfilePage.SAVE_BUTTON),
            on_click=lambda: page.add(selector_of(EditProfilePage.SAVE_TOAST)),
        )
        profile = make(EditProfilePage, page)

        result = profile.update_profile(first_name="Asha", about="  ")

        assert result.confirmed
        assert first.value == "Asha"
        assert about.value == "Old bio"
        assert profile.get_first_name() == "Asha"


class TestHomePage:
    def test_keyboard_scroll_counts_moving_presses(self, page):
        home = make(HomePage, page)

        assert home.scroll_with_keyboard(times=3) == 3
        assert home.did_scroll(0)

    def test_keyboard_scroll_at_bottom(self, page):
        page.page_down_step = 0
        home = make(HomePage, page)

        assert home.scroll_with_keyboard(times=2) == 0

    def test_script_scroll(self, page):
        home = make(HomePage, page)

        assert home.scroll_with_script(1200) == 1200

    def test_is_loaded_on_regional_domain(self, page):
        page.url = "https://in.pinterest.com/"
        assert make(HomePage, page).is_loaded()
