"""Browser session wrapper used by verification scenarios."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions
from selenium.webdriver.support.ui import WebDriverWait

from deploy_verify.configuration.runtime_settings import VerificationSettings

from .page_selectors import Locator, describe
from .scenario_models import VerificationFailure, VerificationSessionError

logger = logging.getLogger(__name__)

CHROME_ARGUMENTS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--window-size=1920,1080",
    "--disable-extensions",
    "--disable-infobars",
)

DriverFactory = Callable[[VerificationSettings], WebDriver]


def build_chrome_options(headless: bool) -> webdriver.ChromeOptions:
    options = webdriver.ChromeOptions()
    if headless:
        options.add_argument("--headless=new")
    for argument in CHROME_ARGUMENTS:
        options.add_argument(argument)
    return options


def create_chrome_driver(settings: VerificationSettings) -> WebDriver:
    """Start Chrome; Selenium Manager resolves a matching driver binary."""
    logger.info("Starting Chrome (headless=%s)", settings.headless)
    try:
        return webdriver.Chrome(options=build_chrome_options(settings.headless))
    except WebDriverException as exc:
        raise VerificationSessionError(f"Failed to start Chrome WebDriver: {exc.msg}") from exc


class BrowserSession:
    """Owns the WebDriver for one verification run.

    Lookups through :meth:`find` are existence checks that return ``None``
    instead of raising, so scenarios branch on optional results. Waiting
    helpers raise :class:`VerificationFailure` on timeout.
    """

    def __init__(
        self,
        driver: WebDriver,
        *,
        base_url: str,
        timeout_seconds: float = 10,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._driver = driver
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def current_url(self) -> str:
        return self._driver.current_url

    def open(self, path: str = "") -> None:
        self._driver.get(f"{self._base_url}{path}")

    def find(self, locator: Locator, *, within: WebElement | None = None) -> WebElement | None:
        matches = self.find_all(locator, within=within)
        return matches[0] if matches else None

    def find_all(self, locator: Locator, *, within: WebElement | None = None) -> list[WebElement]:
        scope = within if within is not None else self._driver
        return list(scope.find_elements(*locator))

    def is_displayed(self, locator: Locator, *, within: WebElement | None = None) -> bool:
        element = self.find(locator, within=within)
        return element is not None and element.is_displayed()

    def wait_for(self, locator: Locator, timeout: float | None = None) -> WebElement:
        return self._wait(expected_conditions.presence_of_element_located(locator), locator, timeout)

    def click(self, locator: Locator) -> WebElement:
        element = self._wait(expected_conditions.element_to_be_clickable(locator), locator)
        element.click()
        return element

    def type_text(self, locator: Locator, text: str) -> WebElement:
        element = self._wait(expected_conditions.visibility_of_element_located(locator), locator)
        element.clear()
        element.send_keys(text)
        return element

    def js_click(self, element: WebElement) -> None:
        """Click through script so overlapping elements cannot intercept it."""
        self._driver.execute_script("arguments[0].click();", element)

    def hover(self, element: WebElement) -> None:
        ActionChains(self._driver).move_to_element(element).perform()

    def scroll_into_view(self, element: WebElement, *, center: bool = False) -> None:
        if center:
            self._driver.execute_script(
                "arguments[0].scrollIntoView({block: 'center'});", element
            )
        else:
            self._driver.execute_script("arguments[0].scrollIntoView(true);", element)

    def scroll_to_top(self) -> None:
        self._driver.execute_script("window.scrollTo(0, 0);")

    def pause(self, seconds: float) -> None:
        self._sleep(seconds)

    def close(self) -> None:
        try:
            self._driver.quit()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to close browser session: %s", exc)

    def _wait(self, condition, locator: Locator, timeout: float | None = None) -> WebElement:
        try:
            return WebDriverWait(self._driver, timeout or self._timeout_seconds).until(condition)
        except TimeoutException as exc:
            raise VerificationFailure(f"Timed out waiting for {describe(locator)}") from exc
