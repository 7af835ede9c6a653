"""
Spotify 授权 - 授权码流程和访问令牌刷新

启动时打开浏览器完成一次授权，本地 aiohttp 服务器接收回调中的授权码，
之后由 get_valid_access_token() 在令牌过期前自动刷新。
"""

import asyncio
import logging
import secrets
import time
import webbrowser
from typing import Optional, Dict, Any
from urllib.parse import urlencode, urlparse

import aiohttp
from aiohttp import web

from lyricstatus.core.errors import AuthError
from lyricstatus.core.interfaces import IAuthService

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"

# 距离过期不足这个时间（秒）时提前刷新
REFRESH_MARGIN = 60

SUCCESS_PAGE = (
    "<h1>Authentication successful!</h1>"
    "<p>You can close this window and return to the terminal.</p>"
)


class SpotifyAuthManager(IAuthService):
    """Spotify OAuth 授权码流程管理器"""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: str,
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        初始化授权管理器

        Args:
            client_id: Spotify 应用 Client ID
            client_secret: Spotify 应用 Client Secret
            redirect_uri: 回调地址，本地服务器监听它的主机和端口
            scopes: 以空格分隔的权限范围
            timeout: 请求超时（秒）
            session: 共享的 aiohttp 会话
        """
        self.logger = logging.getLogger("lyricstatus.spotify.auth")

        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session

        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.expires_at: float = 0.0

        self._state = secrets.token_urlsafe(16)
        self._refresh_lock = asyncio.Lock()

    @property
    def is_authorized(self) -> bool:
        return self.access_token is not None

    def build_authorize_url(self) -> str:
        """构建浏览器授权地址"""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": self.scopes,
            "state": self._state
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def authorize(self, open_browser: bool = True) -> None:
        """
        执行一次浏览器授权握手

        启动本地回调服务器，打开授权页面，等待回调并用授权码换取令牌。

        Raises:
            AuthError: 授权被拒绝或换取令牌失败
        """
        loop = asyncio.get_running_loop()
        code_future: asyncio.Future = loop.create_future()

        parsed = urlparse(self.redirect_uri)
        host = parsed.hostname or "localhost"
        port = parsed.port or 8888
        path = parsed.path or "/callback"

        async def handle_callback(request: web.Request) -> web.Response:
            if request.query.get("error"):
                if not code_future.done():
                    code_future.set_exception(AuthError(f"授权被拒绝: {request.query['error']}"))
                return web.Response(text="Error: authorization denied")

            code = request.query.get("code")
            if not code:
                return web.Response(text="Error: No code received")

            if request.query.get("state") != self._state:
                self.logger.warning("回调 state 不匹配，忽略")
                return web.Response(text="Error: state mismatch")

            try:
                await self._exchange_code(code)
            except AuthError as e:
                self.logger.error(f"Auth error: {e}")
                return web.Response(text="Error during authentication")

            if not code_future.done():
                code_future.set_result(code)
            return web.Response(text=SUCCESS_PAGE, content_type="text/html")

        app = web.Application()
        app.router.add_get(path, handle_callback)
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host, port)
        await site.start()

        try:
            authorize_url = self.build_authorize_url()
            self.logger.info("🔐 正在打开浏览器进行 Spotify 授权...")
            self.logger.info(f"如果浏览器没有自动打开，请手动访问: {authorize_url}")
            if open_browser:
                webbrowser.open(authorize_url)

            await code_future
            # 给浏览器留出接收成功页面的时间
            await asyncio.sleep(1)
        finally:
            await runner.cleanup()

        self.logger.info("✅ Spotify 授权成功")

    async def get_valid_access_token(self) -> str:
        """
        获取有效的访问令牌，即将过期时先刷新

        Raises:
            AuthError: 尚未授权或刷新失败
        """
        if self.access_token is None and self.refresh_token is None:
            raise AuthError("尚未完成 Spotify 授权")

        if self.access_token is None or time.time() >= self.expires_at - REFRESH_MARGIN:
            await self.refresh()

        return self.access_token

    def invalidate(self) -> None:
        """标记访问令牌已失效（例如收到 401）"""
        self.expires_at = 0.0

    async def refresh(self) -> None:
        """
        使用刷新令牌获取新的访问令牌

        Raises:
            AuthError: 没有刷新令牌或刷新请求失败
        """
        if not self.refresh_token:
            raise AuthError("没有可用的刷新令牌")

        async with self._refresh_lock:
            if self.access_token is not None and time.time() < self.expires_at - REFRESH_MARGIN:
                return

            self.logger.debug("刷新 Spotify 访问令牌")
            data = await self._token_request({
                "grant_type": "refresh_token",
                "refresh_token": self.refresh_token
            })
            self._store_tokens(data)

    async def _exchange_code(self, code: str) -> None:
        data = await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri
        })
        self._store_tokens(data)

    def _store_tokens(self, data: Dict[str, Any]) -> None:
        access_token = data.get("access_token")
        if not access_token:
            raise AuthError("令牌响应中缺少 access_token")

        self.access_token = access_token
        # 刷新响应不一定返回新的刷新令牌
        if data.get("refresh_token"):
            self.refresh_token = data["refresh_token"]
        self.expires_at = time.time() + int(data.get("expires_in", 3600))

    async def _token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        auth = aiohttp.BasicAuth(self.client_id, self.client_secret)

        try:
            if self.session is not None:
                return await self._post_token(self.session, form, auth)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._post_token(session, form, auth)
        except asyncio.TimeoutError as e:
            raise AuthError("令牌请求超时") from e
        except aiohttp.ClientError as e:
            raise AuthError(f"令牌请求失败: {e}") from e
        except ValueError as e:
            raise AuthError("令牌响应不是有效的JSON") from e

    async def _post_token(
        self,
        session: aiohttp.ClientSession,
        form: Dict[str, str],
        auth: aiohttp.BasicAuth
    ) -> Dict[str, Any]:
        async with session.post(TOKEN_URL, data=form, auth=auth, timeout=self.timeout) as response:
            if response.status != 200:
                body = await response.text()
                raise AuthError(f"令牌接口返回状态 {response.status}: {body[:200]}", status=response.status)
            return await response.json(content_type=None)
