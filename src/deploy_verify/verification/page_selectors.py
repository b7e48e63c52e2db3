"""Locators for the storefront under test."""

from __future__ import annotations

from selenium.webdriver.common.by import By

Locator = tuple[str, str]


def css(selector: str) -> Locator:
    return (By.CSS_SELECTOR, selector)


def xpath(expression: str) -> Locator:
    return (By.XPATH, expression)


def describe(locator: Locator) -> str:
    strategy, value = locator
    return f"{strategy} '{value}'"


# navbar
NAVBAR = css(".navbar")
LOGO = css(".logo")
NAV_MENU = css(".navbar-menu")
NAV_MENU_LINKS = css(".navbar-menu a")
HEADER = css(".header")
SIGN_IN_BUTTON = css(".navbar-right button")
SEARCH_ICON = css(".navbar-right img:first-child")
CART_ICON = css(".navbar-search-icon")
CART_DOT = css(".navbar-search-icon .dot")

# authenticated-session indicator
PROFILE = css(".navbar-profile")
PROFILE_DROPDOWN = css(".navbar-profile-dropdown")
LOGOUT_ITEM = xpath("//p[text()='Logout']/..")

# auth overlay
LOGIN_POPUP = css(".login-popup")
LOGIN_POPUP_TITLE = css(".login-popup-title h2")
AUTH_MODE_TOGGLE = css(".login-popup-container p span")
NAME_INPUT = css('input[name="name"]')
EMAIL_INPUT = css('input[name="email"]')
PASSWORD_INPUT = css('input[name="password"]')
TERMS_CHECKBOX = css('.login-popup-condition input[type="checkbox"]')
AUTH_SUBMIT = css(".login-popup-container button")

# menu and food list
EXPLORE_MENU = css(".explore-menu")
MENU_CATEGORY = css(".explore-menu-list-item")
CATEGORY_IMAGE = css("img")
FOOD_DISPLAY = css(".food-display")
FOOD_ITEM = css(".food-item")
ADD_BUTTON = css(".add")
ANY_FOOD_ITEM_ADD_BUTTON = css(".food-item .add")
ITEM_COUNTER = css(".food-item-counter")
ITEM_COUNTER_QUANTITY = css(".food-item-counter p")
ITEM_REMOVE_BUTTON = css(".food-item-counter img:first-child")

# cart and order
CART = css(".cart")
CART_TOTAL = css(".cart-total")
PROMO_SECTION = css(".cart-promocode")
PROMO_INPUT = css(".cart-promocode-input input")
CHECKOUT_BUTTON = xpath("//button[contains(text(), 'PROCEED TO CHECKOUT')]")
PLACE_ORDER_FORM = css(".place-order-left")
FIRST_NAME_INPUT = css('input[name="firstName"]')

# footer
FOOTER = css(".footer")
APP_DOWNLOAD = css(".app-download")
MENU_LINK = xpath("//a[contains(text(), 'menu')]")
CONTACT_LINK = xpath("//a[contains(text(), 'contact')]")

CART_ROUTE = "/cart"
ORDER_ROUTE = "/order"
