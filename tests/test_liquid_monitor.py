import liquid_monitor


class FailingMonitor:
    instances = []

    def __init__(self, config):
        self.config = config
        self.stopped = False
        FailingMonitor.instances.append(self)

    async def start(self):
        raise RuntimeError("broker unreachable")

    async def stop(self):
        self.stopped = True


async def test_invalid_config_exits_with_error(tmp_path):
    path = tmp_path / "liquid_monitor.yaml"
    path.write_text("device:\n  poll_interval: -1\n")
    assert await liquid_monitor.main(str(path)) == 1


async def test_failed_start_still_stops_monitor(tmp_path, monkeypatch):
    monkeypatch.setattr(liquid_monitor, "LiquidMonitor", FailingMonitor)
    path = tmp_path / "liquid_monitor.yaml"
    path.write_text("device:\n  host: 10.0.0.7\nlogging:\n  level: warning\n")

    assert await liquid_monitor.main(str(path)) == 1
    app = FailingMonitor.instances[-1]
    assert app.config["device"]["host"] == "10.0.0.7"
    assert app.stopped
