import sys
import asyncio
import logging
from threading import Thread

import pyperclip
from pynput import keyboard
from PySide6.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QHBoxLayout, QStackedWidget, QTextBrowser,
    QPushButton, QLabel, QLineEdit, QSystemTrayIcon, QMenu, QStyle
)
from PySide6.QtGui import QAction, QCursor
from PySide6.QtCore import Signal, QObject, Qt

from kangkang import (
    AppState, CredentialVault, PopupContent, Settings, TranslationClient, TranslationSession
)
from kangkang.constants import APP_TITLE, MESSAGES
from kangkang.render import render_html

settings = Settings.from_env()

# 配置日志
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

POPUP_WIDTH = 640
POPUP_HEIGHT = 380
CURSOR_OFFSET = 12


class Signals(QObject):
    show_content = Signal(object)
    show_repair = Signal(object)
    close_popup = Signal()


class EventLoopThread:
    """在后台线程中运行 asyncio 事件循环，所有翻译状态只在该循环里修改。"""

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self._thread = Thread(target=self._run, name="kangkang-loop", daemon=True)

    def _run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self):
        self._thread.start()

    def submit(self, coro):
        """提交协程，异常只记录日志，不影响进程。"""
        return asyncio.run_coroutine_threadsafe(self._guarded(coro), self.loop)

    def call(self, func, *args):
        self.loop.call_soon_threadsafe(self._guarded_call, func, *args)

    async def _guarded(self, coro):
        try:
            return await coro
        except Exception:
            logger.exception("翻译流程异常")

    @staticmethod
    def _guarded_call(func, *args):
        try:
            func(*args)
        except Exception:
            logger.exception("回调执行异常")

    def stop(self):
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=2)


class PopupWindow(QWidget):
    """单个浮动弹窗：翻译结果页与密钥输入页。"""

    def __init__(self, on_closed, on_submit):
        super().__init__()
        self._on_closed = on_closed
        self._on_submit = on_submit
        self._chinese_text = ""

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.resize(POPUP_WIDTH, POPUP_HEIGHT)
        self.setStyleSheet(
            "QWidget{background:#1e1e1e;color:white;}"
            "QPushButton{border:none;padding:4px 8px;}"
            "QLineEdit{padding:10px;border-radius:8px;background:#2b2b2b;}"
        )

        self.stack = QStackedWidget()
        self.stack.addWidget(self._build_result_page())
        self.stack.addWidget(self._build_repair_page())

        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 12, 18, 18)
        layout.addWidget(self.stack)

    def _build_result_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)

        header = QHBoxLayout()
        copy_button = QPushButton("📋")
        copy_button.clicked.connect(self._copy_chinese)
        close_button = QPushButton("✕")
        close_button.clicked.connect(self.close_by_user)
        header.addWidget(copy_button)
        header.addStretch(1)
        header.addWidget(close_button)
        self.copy_button = copy_button

        self.browser = QTextBrowser()
        self.browser.setStyleSheet("border:none;")
        layout.addLayout(header)
        layout.addWidget(self.browser)
        return page

    def _build_repair_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        title = QLabel(MESSAGES['repair_title'])
        title.setStyleSheet("font-size:18px;font-weight:bold;")
        self.key_input = QLineEdit()
        self.key_input.setEchoMode(QLineEdit.EchoMode.Password)
        self.key_input.returnPressed.connect(self._submit)
        self.repair_error = QLabel("")
        self.repair_error.setStyleSheet("color:#ff6b6b;")

        buttons = QHBoxLayout()
        save_button = QPushButton(MESSAGES['save'])
        save_button.clicked.connect(self._submit)
        cancel_button = QPushButton(MESSAGES['cancel'])
        cancel_button.clicked.connect(self.close_by_user)
        buttons.addStretch(1)
        buttons.addWidget(save_button)
        buttons.addWidget(cancel_button)

        layout.addWidget(title)
        layout.addWidget(self.key_input)
        layout.addWidget(self.repair_error)
        layout.addStretch(1)
        layout.addLayout(buttons)
        return page

    def _place_at_cursor(self):
        if self.isVisible():
            return
        pos = QCursor.pos()
        self.move(pos.x() + CURSOR_OFFSET, pos.y() + CURSOR_OFFSET)

    def show_content(self, content: PopupContent):
        self._chinese_text = content.segments.chinese_text() or content.chinese_text
        self.browser.setHtml(render_html(content))
        self.stack.setCurrentIndex(0)
        self._place_at_cursor()
        self.show()
        self.raise_()

    def show_repair(self, error):
        if self.stack.currentIndex() != 1 or not self.isVisible():
            self.key_input.clear()
        self.repair_error.setText(error or "")
        self.stack.setCurrentIndex(1)
        self._place_at_cursor()
        self.show()
        self.activateWindow()
        self.key_input.setFocus()

    def _submit(self):
        self._on_submit(self.key_input.text())

    def _copy_chinese(self):
        if self._chinese_text:
            QApplication.clipboard().setText(self._chinese_text)
            self.copy_button.setText("✅")

    def close_by_user(self):
        self.hide()
        self.copy_button.setText("📋")
        self._on_closed()

    def close_quietly(self):
        self.hide()
        self.copy_button.setText("📋")

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            self.close_by_user()
            return
        super().keyPressEvent(event)


class QtPopupHost:
    """PopupHost 实现：在事件循环线程调用，通过信号切回界面线程。"""

    def __init__(self, signals: Signals):
        self.signals = signals

    def show(self, content):
        self.signals.show_content.emit(content)

    def show_repair(self, error=None):
        self.signals.show_repair.emit(error)

    def close(self):
        self.signals.close_popup.emit()


class MainApp:
    def __init__(self, qt_app: QApplication):
        self.qt_app = qt_app
        self.worker = EventLoopThread()
        self.signals = Signals()

        vault = CredentialVault(settings.config_path)
        api_key = vault.load()
        client = TranslationClient(
            api_key,
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout,
        )
        if not api_key:
            logger.info("未找到已保存的 API 密钥")

        self.state = AppState(vault=vault, client=client)
        self.session = TranslationSession(self.state, QtPopupHost(self.signals))

        self.popup = PopupWindow(
            on_closed=lambda: self.worker.call(self.session.dismiss),
            on_submit=lambda key: self.worker.call(self.session.submit_credential, key),
        )
        self.signals.show_content.connect(self.popup.show_content)
        self.signals.show_repair.connect(self.popup.show_repair)
        self.signals.close_popup.connect(self.popup.close_quietly)

        self._init_tray()
        self.hotkeys = keyboard.GlobalHotKeys({
            settings.hotkey_translate: self.on_translate_hotkey,
            settings.hotkey_repair: self.on_repair_hotkey,
        })

    def _init_tray(self):
        """托盘菜单"""
        self.tray = QSystemTrayIcon(
            self.qt_app.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation)
        )
        self.tray.setToolTip(APP_TITLE)
        menu = QMenu()
        for label in (APP_TITLE, None, MESSAGES['hint_translate'], MESSAGES['hint_repair'], None):
            if label is None:
                menu.addSeparator()
                continue
            action = QAction(label, menu)
            action.setEnabled(False)
            menu.addAction(action)
        quit_action = QAction(MESSAGES['quit'], menu)
        quit_action.triggered.connect(self.qt_app.quit)
        menu.addAction(quit_action)
        self.tray_menu = menu
        self.tray.setContextMenu(menu)
        self.tray.show()

    def on_translate_hotkey(self):
        self.worker.submit(self.session.trigger_from_clipboard(pyperclip.paste))

    def on_repair_hotkey(self):
        self.worker.call(self.session.open_repair)

    def start(self):
        self.worker.start()
        self.hotkeys.start()
        logger.info("Kang Kang AI 已启动 (%s 翻译, %s 更换密钥)",
                    settings.hotkey_translate, settings.hotkey_repair)

    def cleanup(self):
        """清理资源"""
        try:
            self.hotkeys.stop()
            self.worker.submit(self.state.client.aclose()).result(timeout=2)
        except Exception as e:
            logger.error(f"资源清理失败: {str(e)}")
        finally:
            self.worker.stop()


if __name__ == '__main__':
    try:
        app = QApplication(sys.argv)
        app.setQuitOnLastWindowClosed(False)
        main_app = MainApp(app)
        main_app.start()

        exit_code = app.exec()

        # 清理资源
        main_app.cleanup()

        sys.exit(exit_code)

    except Exception as e:
        logger.critical(f"应用程序异常退出: {str(e)}")
        sys.exit(1)
