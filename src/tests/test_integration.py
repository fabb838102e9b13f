"""集成测试

测试队列、传输方式和命令行协同工作的场景。
"""

import threading
from unittest.mock import Mock, patch

import httpx
import pytest

from config.settings import RequestConfig
from core.exceptions import ConfigurationError
from core.models import MAX_CONCURRENCY, TransportKind
from main import main, print_report, run_requests
from services.request_queue import RequestQueue
from transports.fetch import FetchTransport


def make_transport(max_seen=None):
    """创建基于 httpx MockTransport 的传输方式"""
    lock = threading.Lock()
    state = {"running": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if max_seen is not None:
            with lock:
                state["running"] += 1
                max_seen.append(state["running"])
        try:
            if path.startswith("/missing"):
                return httpx.Response(404)
            if path.startswith("/broken"):
                return httpx.Response(200, content=b"{")
            return httpx.Response(
                200, json={"path": path}, headers={"Cache-Control": "max-age=60"}
            )
        finally:
            if max_seen is not None:
                with lock:
                    state["running"] -= 1

    client = httpx.Client(transport=httpx.MockTransport(handler))
    return FetchTransport(RequestConfig(), client=client)


class TestQueueWithFetchTransport:
    """队列与 FetchTransport 集成测试"""

    def test_mixed_results(self):
        """测试成功、404 和解析失败混合的请求"""
        transport = make_transport()
        queue = RequestQueue(transport=transport)
        urls = [f"http://api.test/ok/{i}" for i in range(30)]
        urls += ["http://api.test/missing", "http://api.test/broken"]

        results = dict(run_requests(urls, queue))
        queue.close()

        assert len(results) == 32
        assert results["http://api.test/missing"].status_code == 404
        assert results["http://api.test/broken"].body is None
        assert not results["http://api.test/broken"].ok
        assert results["http://api.test/ok/7"].body == {"path": "/ok/7"}
        assert results["http://api.test/ok/7"].ttl == 60
        assert queue.in_flight == 0

    def test_bound_holds_under_load(self):
        """测试大量请求下并发数不超过上限"""
        seen: list[int] = []
        transport = make_transport(seen)
        queue = RequestQueue(transport=transport)

        results = run_requests([f"http://api.test/ok/{i}" for i in range(200)], queue)
        queue.close()

        assert len(results) == 200
        assert max(seen) <= MAX_CONCURRENCY


class TestMain:
    """命令行测试"""

    @pytest.fixture(autouse=True)
    def keep_logging(self, monkeypatch):
        """保留 pytest 的日志处理器"""
        monkeypatch.setattr("main.setup_logging", Mock())

    def test_list_transports(self, capsys):
        """测试列出传输方式"""
        assert main(["--list-transports"]) == 0
        out = capsys.readouterr().out
        for kind in TransportKind:
            assert kind.value in out

    def test_run_success(self, capsys):
        """测试全部成功时返回 0"""
        transport = make_transport()
        with patch("main.RequestQueue", return_value=RequestQueue(transport=transport)):
            code = main(["http://api.test/ok/1", "http://api.test/ok/2"])

        assert code == 0
        out = capsys.readouterr().out
        assert "http://api.test/ok/1" in out
        assert "TTL 60s" in out

    def test_run_with_failure(self, capsys):
        """测试存在失败时返回 1"""
        transport = make_transport()
        with patch("main.RequestQueue", return_value=RequestQueue(transport=transport)):
            code = main(["http://api.test/ok/1", "http://api.test/missing"])

        assert code == 1
        assert "Unexpected status code [404]" in capsys.readouterr().out

    def test_transport_option(self):
        """测试 --transport 指定优先级"""
        transport = make_transport()
        with patch(
            "main.RequestQueue", return_value=RequestQueue(transport=transport)
        ) as mock_queue:
            main(["http://api.test/ok/1", "--transport", "fetch", "legacy"])

        config = mock_queue.call_args[1]["config"]
        assert config.transports == [TransportKind.FETCH, TransportKind.LEGACY]

    def test_configuration_error(self):
        """测试没有可用传输方式时返回 2"""
        with patch(
            "services.request_queue.select_transport",
            side_effect=ConfigurationError("No request handler available"),
        ):
            assert main(["http://api.test/ok/1"]) == 2

    def test_print_report_empty(self, capsys):
        """测试空报告"""
        print_report([])
        assert "总计: 0" in capsys.readouterr().out
