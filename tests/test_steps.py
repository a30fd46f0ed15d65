"""Tests for the mutating steps and verification."""

import dataclasses
import json

import pytest

from dockerup.config import Settings
from dockerup.errors import (
    InstallationError,
    RepositorySetupError,
    ServiceControlError,
    ServiceNotRunningError,
    UserAccessError,
    VerificationError,
)
from dockerup.paths import DAEMON_CONFIG_PATH, KEYRING_PATH, SOURCE_LIST_PATH
from dockerup.pipeline import Architecture, DaemonConfig, StepStatus, render_source_list, render_summary
from dockerup.pipeline.configure import configure_daemon, configure_user
from dockerup.pipeline.engine import ENGINE_PACKAGES, install_engine, remove_legacy_packages
from dockerup.pipeline.repository import install_prerequisites, setup_repository
from dockerup.pipeline.verify import verify_installation

INSTALLED = (0, "install ok installed")

EXPECTED_DAEMON_JSON = {
    "log-driver": "json-file",
    "log-opts": {"max-size": "10m", "max-file": "3"},
    "storage-driver": "overlay2",
    "features": {"buildkit": True},
    "default-address-pools": [{"base": "172.20.0.0/16", "size": 24}],
    "userland-proxy": False,
    "experimental": False,
    "live-restore": True,
}


class TestRepositorySetup:
    def test_source_list_line(self, noble_host):
        assert render_source_list(noble_host) == (
            "deb [arch=amd64 signed-by=/etc/apt/keyrings/docker.gpg] "
            "https://download.docker.com/linux/ubuntu noble stable\n"
        )

    def test_source_list_follows_host(self, noble_host):
        host = dataclasses.replace(
            noble_host, codename="jammy", architecture=Architecture.ARMHF, raw_architecture="armhf"
        )
        line = render_source_list(host)
        assert "arch=armhf" in line
        assert " jammy stable" in line

    @pytest.mark.asyncio
    async def test_prerequisites(self, make_context):
        ctx = make_context()
        result = await install_prerequisites(ctx)
        assert result.status == StepStatus.OK
        assert ctx.runner.calls[0] == "sudo apt-get update"
        assert ctx.runner.calls[1].startswith("sudo apt-get install -y apt-transport-https")

    @pytest.mark.asyncio
    async def test_writes_key_and_source_list(self, make_context):
        ctx = make_context()

        result = await setup_repository(ctx)

        assert result.status == StepStatus.OK
        gpg = f"sudo gpg --batch --yes --dearmor -o {KEYRING_PATH}"
        assert ctx.runner.inputs[gpg].startswith(b"-----BEGIN PGP")
        tee = f"sudo tee {SOURCE_LIST_PATH}"
        assert ctx.runner.inputs[tee] == render_source_list(ctx.host).encode()
        assert ctx.runner.calls[-1] == "sudo apt-get update"

    @pytest.mark.asyncio
    async def test_rerun_writes_identical_files(self, make_context):
        first = make_context()
        await setup_repository(first)
        second = make_context()
        await setup_repository(second)

        assert first.runner.inputs == second.runner.inputs
        assert first.runner.calls == second.runner.calls

    @pytest.mark.asyncio
    async def test_key_fetch_failure_is_fatal(self, make_context):
        ctx = make_context({"curl -fsSL": (22, "")})
        with pytest.raises(RepositorySetupError, match="curl"):
            await setup_repository(ctx)
        assert not ctx.runner.ran("sudo tee")

    @pytest.mark.asyncio
    async def test_index_refresh_failure_is_fatal(self, make_context):
        ctx = make_context({"sudo apt-get update": (100, "")})
        with pytest.raises(RepositorySetupError, match="apt-get update"):
            await setup_repository(ctx)


class TestEngineInstallation:
    @pytest.mark.asyncio
    async def test_nothing_to_remove(self, make_context):
        ctx = make_context()
        result = await remove_legacy_packages(ctx)
        assert result.status == StepStatus.OK
        assert not ctx.runner.ran("sudo apt-get remove")

    @pytest.mark.asyncio
    async def test_removes_installed_legacy_packages(self, make_context):
        ctx = make_context({"dpkg-query -W -f=${Status} docker.io": INSTALLED})

        result = await remove_legacy_packages(ctx)

        assert result.status == StepStatus.OK
        assert "docker.io" in result.message
        assert ctx.runner.ran("sudo apt-get remove -y docker.io")
        assert not ctx.runner.ran("sudo apt-get remove -y runc")

    @pytest.mark.asyncio
    async def test_removal_failure_only_warns(self, make_context):
        ctx = make_context(
            {
                "dpkg-query -W -f=${Status} runc": INSTALLED,
                "sudo apt-get remove -y runc": (100, ""),
            }
        )

        result = await remove_legacy_packages(ctx)

        assert result.status == StepStatus.WARN
        assert "Could not remove runc" in result.warnings[0]
        assert "WARNING: Could not remove runc" in ctx.run_log.path.read_text()

    @pytest.mark.asyncio
    async def test_install_is_one_transaction(self, make_context):
        ctx = make_context()
        result = await install_engine(ctx)
        assert result.status == StepStatus.OK
        assert ctx.runner.calls == [f"sudo apt-get install -y {' '.join(ENGINE_PACKAGES)}"]

    @pytest.mark.asyncio
    async def test_install_failure_is_fatal(self, make_context):
        ctx = make_context({"sudo apt-get install -y docker-ce": (100, "")})
        with pytest.raises(InstallationError, match="status 100"):
            await install_engine(ctx)


class TestUserAccess:
    @pytest.mark.asyncio
    async def test_group_and_socket(self, make_context):
        ctx = make_context()

        result = await configure_user(ctx)

        assert ctx.runner.calls == [
            "sudo usermod -aG docker alice",
            "sudo chmod 666 /var/run/docker.sock",
        ]
        assert result.status == StepStatus.WARN
        assert "log out and back in" in result.warnings[0]

    @pytest.mark.asyncio
    async def test_usermod_failure(self, make_context):
        ctx = make_context({"sudo usermod": (6, "")})
        with pytest.raises(UserAccessError):
            await configure_user(ctx)


class TestDaemonConfig:
    def test_exact_fields(self):
        assert DaemonConfig().to_dict() == EXPECTED_DAEMON_JSON

    def test_render_is_valid_json(self):
        text = DaemonConfig().render()
        assert json.loads(text) == EXPECTED_DAEMON_JSON
        assert text.endswith("}\n")

    @pytest.mark.asyncio
    async def test_writes_config_then_controls_service(self, make_context):
        ctx = make_context()

        result = await configure_daemon(ctx)

        assert result.status == StepStatus.OK
        written = ctx.runner.inputs[f"sudo tee {DAEMON_CONFIG_PATH}"]
        assert json.loads(written) == EXPECTED_DAEMON_JSON
        assert ctx.runner.calls[-3:] == [
            "sudo systemctl enable docker",
            "sudo systemctl start docker",
            "sudo systemctl restart docker",
        ]

    @pytest.mark.asyncio
    async def test_config_does_not_depend_on_resources(self, make_context, noble_host):
        host = dataclasses.replace(noble_host, disk_free_kb=10, total_mem_mb=64)
        ctx = make_context(host=host)
        await configure_daemon(ctx)
        written = ctx.runner.inputs[f"sudo tee {DAEMON_CONFIG_PATH}"]
        assert json.loads(written) == EXPECTED_DAEMON_JSON

    @pytest.mark.asyncio
    async def test_start_failure_is_fatal(self, make_context):
        ctx = make_context({"sudo systemctl start docker": (1, "")})
        with pytest.raises(ServiceControlError, match="systemctl start"):
            await configure_daemon(ctx)
        assert not ctx.runner.ran("sudo systemctl restart")


class TestVerification:
    @pytest.mark.asyncio
    async def test_success_builds_summary(self, make_context):
        ctx = make_context()

        result = await verify_installation(ctx)

        assert result.status == StepStatus.OK
        assert ctx.summary.engine_version == "27.3.1"
        assert ctx.summary.compose_version == "2.29.7"
        assert ctx.summary.architecture == "amd64"
        assert ctx.summary.os_version == "24.04 (noble)"
        assert ctx.summary.log_path == ctx.run_log.path
        assert ctx.runner.ran("docker run --rm hello-world")

    @pytest.mark.asyncio
    async def test_service_not_running_is_fatal(self, make_context):
        ctx = make_context({"sudo systemctl is-active": (3, "")})
        with pytest.raises(ServiceNotRunningError):
            await verify_installation(ctx)
        assert not ctx.runner.ran("docker run")

    @pytest.mark.asyncio
    async def test_smoke_test_failure_only_warns(self, make_context):
        ctx = make_context({"docker run --rm hello-world": (125, "")})

        result = await verify_installation(ctx)

        assert result.status == StepStatus.WARN
        assert "docker run hello-world" in result.warnings[0]
        assert ctx.summary is not None

    @pytest.mark.asyncio
    async def test_smoke_test_can_be_skipped(self, make_context):
        ctx = make_context(settings=Settings(skip_smoke_test=True))
        await verify_installation(ctx)
        assert not ctx.runner.ran("docker run")

    @pytest.mark.asyncio
    async def test_custom_smoke_test_image(self, make_context):
        ctx = make_context(settings=Settings(smoke_test_image="busybox:latest"))
        await verify_installation(ctx)
        assert ctx.runner.ran("docker run --rm busybox:latest")

    @pytest.mark.asyncio
    async def test_missing_cli_is_fatal(self, make_context):
        ctx = make_context({"docker --version": (127, "")})
        with pytest.raises(VerificationError, match="Docker CLI"):
            await verify_installation(ctx)

    @pytest.mark.asyncio
    async def test_summary_rendering(self, make_context):
        ctx = make_context()
        await verify_installation(ctx)
        text = render_summary(ctx.summary)
        assert "Docker Engine: 27.3.1" in text
        assert "Architecture: amd64" in text
        assert "Ubuntu Version: 24.04 (noble)" in text
        assert f"Installation Log: {ctx.run_log.path}" in text
