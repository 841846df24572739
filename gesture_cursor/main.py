"""
Main application for the gesture cursor.
"""
import argparse
import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Tuple

import cv2
import numpy as np
from dotenv import load_dotenv

from .camera import CameraFrameSource
from .config import Cfg, load_config
from .controller_mock import MockController
from .engine import InteractionEngine
from .errors import ClassifierUnavailable, DeviceError, TransientClassificationFailure
from .overlay import OverlayRenderer
from .types import (
    ClassificationResult, ClickCommand, ControllerProto, Frame, GestureChangeCommand,
    HoverCommand, ScrollCommand, TickResult
)

logger = logging.getLogger(__name__)


def setup_logging(cfg: Cfg) -> None:
    logging.basicConfig(level=getattr(logging, cfg.logging.level, logging.INFO), format=cfg.logging.format)


def _default_classifier(cfg: Cfg):
    # mediapipe is only imported once a real classifier is needed
    from .recognizer import GestureClassifier
    return GestureClassifier.from_config(cfg)


def _discard_result(future: asyncio.Future) -> None:
    """Retrieve the outcome of a classification abandoned by stop()."""
    if future.cancelled():
        return
    e = future.exception()
    if e is not None:
        logger.debug("Discarded classification after stop: %s", e)


class GestureCursorApp:
    """
    Runs the capture -> classify -> engine -> render loop.

    ``start`` performs the awaited setup (camera, model). Once it returns the
    loop ticks at ``engine.target_fps``. Classification runs on a single
    worker thread; a tick that does not get its result within
    ``engine.frame_budget_ms`` is skipped and the result is picked up by a
    later tick. ``stop`` tears everything down and no controller call is made
    afterwards.
    """

    def __init__(self, config: Cfg, controller: Optional[ControllerProto] = None,
                 frame_source=None,
                 classifier_factory: Optional[Callable[[Cfg], object]] = None):
        """
        Args:
            config: Loaded configuration
            controller: Host receiving hover/click/gesture/scroll calls
            frame_source: Object with open/read/release; a camera by default
            classifier_factory: Builds the classifier from the config
        """
        self.config = config
        self.controller = controller or MockController()
        self.frame_source = frame_source or CameraFrameSource.from_config(config)
        self._classifier_factory = classifier_factory or _default_classifier
        self.classifier = None
        self.engine: Optional[InteractionEngine] = None
        self.renderer = OverlayRenderer(config.display, mirror=config.camera.mirror)
        self.last_overlay: Optional[np.ndarray] = None
        self.enabled = False

        self._executor: Optional[ThreadPoolExecutor] = None
        self._inflight: Optional[asyncio.Future] = None
        self._last_submitted_ms: Optional[int] = None
        self._window_open = False

    async def start(self) -> None:
        """
        Open the camera and load the classifier.

        Raises:
            DeviceError: camera unavailable; nothing is left open
            ClassifierUnavailable: model failed to load; the camera is released

        Any other startup failure is re-raised as is, also with the camera released.
        """
        if self.enabled:
            return

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self.frame_source.open)
            self.classifier = await loop.run_in_executor(None, self._classifier_factory, self.config)
        except BaseException as e:
            logger.error("Startup failed: %r", e)
            self.frame_source.release()
            if self.classifier is not None:
                self.classifier.close()
                self.classifier = None
            raise

        self.engine = InteractionEngine(self.config)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="classifier")
        self._last_submitted_ms = None
        self.enabled = True
        logger.info("Gesture cursor started")

    def _capture_and_classify(self) -> Optional[Tuple[Frame, ClassificationResult]]:
        """Runs on the classifier thread."""
        frame = self.frame_source.read()
        if frame is None:
            return None
        if self._last_submitted_ms is not None and frame.timestamp_ms <= self._last_submitted_ms:
            return None
        self._last_submitted_ms = frame.timestamp_ms
        return frame, self.classifier.classify(frame.image, frame.timestamp_ms)

    async def tick(self) -> Optional[TickResult]:
        """
        Run one tick.

        Returns:
            The engine output if a new result was applied, None if the tick was skipped
        """
        if not self.enabled:
            return None

        inflight = self._inflight
        if inflight is None:
            loop = asyncio.get_running_loop()
            inflight = self._inflight = loop.run_in_executor(self._executor, self._capture_and_classify)

        done, _ = await asyncio.wait({inflight}, timeout=self.config.engine.frame_budget_ms / 1000.0)
        # stop() may have run while this tick was waiting
        if not done or not self.enabled:
            return None

        self._inflight = None
        try:
            outcome = inflight.result()
        except TransientClassificationFailure as e:
            logger.debug("Skipping tick: %s", e)
            return None

        if outcome is None:
            return None

        frame, result = outcome
        tick = self.engine.process(result, frame.timestamp_ms)
        if tick is None:
            return None

        self.last_overlay = self.renderer.render(frame.image, tick)
        await self._dispatch(tick)
        return tick

    async def _dispatch(self, tick: TickResult) -> None:
        for command in tick.commands:
            if not self.enabled:
                return
            if isinstance(command, HoverCommand):
                await self.controller.hover(command.x, command.y, command.gesture)
            elif isinstance(command, ClickCommand):
                await self.controller.click(command.x, command.y)
            elif isinstance(command, GestureChangeCommand):
                await self.controller.gesture_changed(command.gesture, command.x, command.y)
            elif isinstance(command, ScrollCommand):
                await self.controller.scroll_by(command.dy_px)

    def _show_window(self) -> None:
        if self.last_overlay is None:
            return
        cv2.imshow(self.config.display.window_name, self.last_overlay)
        self._window_open = True
        if cv2.waitKey(1) & 0xFF == ord('q'):
            self.enabled = False

    async def run(self) -> None:
        """Run the main loop until stopped (or 'q' in the preview window)."""
        await self.start()
        loop = asyncio.get_running_loop()
        interval = 1.0 / self.config.engine.target_fps

        try:
            while self.enabled:
                started = loop.time()
                await self.tick()
                if self.config.display.show_window:
                    self._show_window()
                await asyncio.sleep(max(0.0, interval - (loop.time() - started)))
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop ticking, release the camera and the classifier."""
        if self.engine is None:
            return

        self.enabled = False
        self.engine.close()

        inflight, self._inflight = self._inflight, None
        if inflight is not None:
            inflight.add_done_callback(_discard_result)

        if self._executor is not None:
            # waits for at most one in-flight classification
            executor, self._executor = self._executor, None
            await asyncio.get_running_loop().run_in_executor(None, executor.shutdown, True)

        self.frame_source.release()
        if self.classifier is not None:
            self.classifier.close()
            self.classifier = None
        if self._window_open:
            cv2.destroyWindow(self.config.display.window_name)
            self._window_open = False

        self.engine = None
        logger.info("Gesture cursor stopped")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Camera-driven pointer, dwell click and drag scroll.")
    parser.add_argument("--config", help="YAML file overriding config.default.yaml")
    parser.add_argument("--browser", metavar="URL", help="Control a Chromium page at URL instead of the mock controller")
    parser.add_argument("--headless", action="store_true", help="Run without the camera preview window and without a visible browser window")
    parser.add_argument("--log-level", help="Override logging.level")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """Entry point for the application."""
    load_dotenv()
    args = parse_args(argv)
    config = load_config(args.config or os.getenv("GESTURE_CURSOR_CONFIG"))
    if args.log_level:
        config.logging.level = args.log_level.upper()
    if args.headless:
        config.display.show_window = False
    setup_logging(config)

    controller = None
    url = args.browser or os.getenv("GESTURE_CURSOR_URL")
    if url:
        from .controller_browser import BrowserController
        controller = await BrowserController.launch(url, headless=args.headless)

    print("🎯 Gesture Cursor:")
    print(f"  - {config.pointer.gesture} = Pointer (hold still {config.pointer.dwell_time_ms:.0f}ms to click)")
    print(f"  - {config.scroll.gesture} + Vertical Motion = Scroll")
    if config.display.show_window:
        print("Press 'q' in the preview window to quit")

    app = GestureCursorApp(config, controller)
    try:
        await app.run()
    except (DeviceError, ClassifierUnavailable) as e:
        print(f"Error: {e}")
        return 1
    finally:
        await app.stop()
        if controller is not None and hasattr(controller, 'close'):
            await controller.close()
    return 0


def cli() -> None:
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        # main() has already torn the app down in its finally block
        print("\nApplication interrupted by user")
        code = 0
    raise SystemExit(code)


if __name__ == "__main__":
    cli()
