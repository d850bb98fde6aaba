"""
Unit tests for license key generation and host machine ids.
"""

import re
from unittest import mock

from licenses.domain import machine
from licenses.domain.license_key import LICENSE_KEY_LENGTH, KeyGenerator, generate_license_key


class TestLicenseKeyGeneration:
    """Tests for generate_license_key."""

    def test_key_format(self):
        """Test keys are 24 uppercase hex characters."""
        key = generate_license_key()

        assert len(key) == LICENSE_KEY_LENGTH
        assert re.fullmatch(r"[0-9A-F]{24}", key)

    def test_keys_are_unique(self):
        """Test many generated keys do not collide."""
        keys = {generate_license_key() for _ in range(1000)}
        assert len(keys) == 1000

    def test_generator_class(self):
        """Test KeyGenerator returns well-formed keys."""
        assert re.fullmatch(r"[0-9A-F]{24}", KeyGenerator().generate())


class TestHostMachineId:
    """Tests for host_machine_id."""

    def test_stable_across_calls(self):
        """Test the same host always yields the same id."""
        assert machine.host_machine_id() == machine.host_machine_id()

    def test_format(self):
        """Test ids are 16 lowercase hex characters."""
        assert re.fullmatch(r"[0-9a-f]{16}", machine.host_machine_id())

    def test_uses_hardware_address(self):
        """Test the MAC address drives the id when available."""
        with mock.patch.object(machine.uuid, "getnode", return_value=0x001122334455):
            first = machine.host_machine_id()
        with mock.patch.object(machine.uuid, "getnode", return_value=0x001122334466):
            second = machine.host_machine_id()

        assert first != second

    def test_random_node_falls_back_to_hostname(self):
        """Test a random (multicast) node is ignored in favour of the hostname."""
        with mock.patch.object(machine.uuid, "getnode", return_value=0x010000000001), mock.patch.object(
            machine.socket, "gethostname", return_value="build-host"
        ):
            first = machine.host_machine_id()
        with mock.patch.object(machine.uuid, "getnode", return_value=0x030000000002), mock.patch.object(
            machine.socket, "gethostname", return_value="build-host"
        ):
            second = machine.host_machine_id()

        assert first == second
