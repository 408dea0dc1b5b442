"""Tests for amtrpc/maintenance/dispatcher.py"""

from unittest.mock import MagicMock, patch

import pytest

from amtrpc.amt.exceptions import HECIError
from amtrpc.amt.pthi import AMTCommand, PTHICommand
from amtrpc.exceptions import ReturnCode
from amtrpc.maintenance.dispatcher import maintenance_usage, read_password_from_user

REMOTE = ["-u", "wss://server/activate"]
CREDENTIALS = ["-password", "Passw0rd!"] + REMOTE


class TestDispatchSelection:
    """Sub-command selection."""

    @pytest.mark.parametrize("subcommand", [None, "", "syncall", "SYNCCLOCK", "activate"])
    def test_unknown_subcommand(self, make_dispatcher, session, subcommand, capsys):
        """Unknown or missing sub-commands print usage and run no handler."""
        dispatcher = make_dispatcher()
        dispatcher.handlers = {name: MagicMock() for name in dispatcher.handlers}

        rc = dispatcher.dispatch(subcommand, CREDENTIALS, session)

        assert rc == ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS
        assert all(not handler.called for handler in dispatcher.handlers.values())
        dispatcher.password_reader.assert_not_called()
        assert "Supported Maintenance Commands" in capsys.readouterr().out

    def test_known_subcommands(self, make_dispatcher):
        """The fixed set of maintenance commands is registered."""
        assert set(make_dispatcher().handlers) == {
            "syncclock",
            "synchostname",
            "syncip",
            "changepassword",
            "syncdeviceinfo",
        }

    @pytest.mark.parametrize("subcommand", ["syncclock", "syncdeviceinfo"])
    def test_flag_only_commands(self, make_dispatcher, session, subcommand):
        """Clock and device info sync succeed with credentials and URL."""
        rc = make_dispatcher().dispatch(subcommand, CREDENTIALS, session)
        assert rc == ReturnCode.SUCCESS
        assert session.subcommand == subcommand


class TestPreconditions:
    """Shared password and URL checks."""

    def test_password_copied_to_local_config(self, make_dispatcher, session):
        """A supplied password is used without prompting."""
        dispatcher = make_dispatcher()
        assert dispatcher.dispatch("syncclock", CREDENTIALS, session) == ReturnCode.SUCCESS
        dispatcher.password_reader.assert_not_called()
        assert session.local_config.password == "Passw0rd!"

    def test_password_prompted_when_missing(self, make_dispatcher, session):
        """Without -password the user is prompted."""
        dispatcher = make_dispatcher(password_reader=MagicMock(return_value="typed"))
        assert dispatcher.dispatch("syncclock", REMOTE, session) == ReturnCode.SUCCESS
        dispatcher.password_reader.assert_called_once_with()
        assert session.password == "typed"
        assert session.local_config.password == "typed"

    def test_empty_prompt_fails(self, make_dispatcher, session):
        """An empty answer at the prompt is a password error."""
        dispatcher = make_dispatcher(password_reader=MagicMock(return_value=""))
        assert dispatcher.dispatch("syncclock", REMOTE, session) == ReturnCode.MISSING_OR_INCORRECT_PASSWORD

    def test_missing_url(self, make_dispatcher, session, capsys):
        """A remote invocation without -u fails with a URL error and usage."""
        rc = make_dispatcher().dispatch("syncclock", ["-password", "x"], session)
        assert rc == ReturnCode.MISSING_OR_INCORRECT_URL
        out = capsys.readouterr().out
        assert "-u flag is required and cannot be empty" in out
        assert "Supported Maintenance Commands" in out

    def test_password_starting_with_dash(self, make_dispatcher, session):
        assert make_dispatcher().dispatch("syncclock", ["-password", "-Secr3t!", "-local"], session) == ReturnCode.SUCCESS
        assert session.local_config.password == "-Secr3t!"

    def test_local_needs_no_url(self, make_dispatcher, session):
        """-local skips the URL requirement."""
        assert make_dispatcher().dispatch("syncclock", ["-password", "x", "-local"], session) == ReturnCode.SUCCESS

    def test_password_checked_before_url(self, make_dispatcher, session):
        """With neither password nor URL the password error wins."""
        dispatcher = make_dispatcher(password_reader=MagicMock(return_value=""))
        assert dispatcher.dispatch("syncclock", [], session) == ReturnCode.MISSING_OR_INCORRECT_PASSWORD

    def test_handler_failure_short_circuits(self, make_dispatcher, session):
        """A failing handler is returned as is and no prompt happens."""
        dispatcher = make_dispatcher()
        rc = dispatcher.dispatch("syncclock", ["-bogus"] + REMOTE, session)
        assert rc == ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS
        dispatcher.password_reader.assert_not_called()


class TestSyncHostname:
    """synchostname handler."""

    def test_fills_hostname_info(self, make_dispatcher, session):
        """Hostname and OS DNS suffix are captured."""
        assert make_dispatcher().dispatch("synchostname", CREDENTIALS, session) == ReturnCode.SUCCESS
        assert session.hostname_info.hostname == "host01"
        assert session.hostname_info.dns_suffix_os == "corp.example.com"

    def test_empty_hostname(self, make_dispatcher, session):
        """An empty OS hostname fails before any credential check."""
        dispatcher = make_dispatcher(hostname_lookup=MagicMock(return_value=""))
        rc = dispatcher.dispatch("synchostname", REMOTE, session)
        assert rc == ReturnCode.OS_NETWORK_INTERFACES_LOOKUP_FAILED
        dispatcher.password_reader.assert_not_called()

    def test_hostname_lookup_error(self, make_dispatcher, session):
        """An OS error reading the hostname fails the lookup."""
        dispatcher = make_dispatcher(hostname_lookup=MagicMock(side_effect=OSError("no hostname")))
        rc = dispatcher.dispatch("synchostname", CREDENTIALS, session)
        assert rc == ReturnCode.OS_NETWORK_INTERFACES_LOOKUP_FAILED

    @pytest.mark.parametrize("error", [HECIError("no device"), OSError("resolver down")])
    def test_dns_suffix_error_is_ignored(self, make_dispatcher, session, error):
        """A failing DNS suffix read leaves the field empty and carries on."""
        dispatcher = make_dispatcher(dns_suffix_lookup=MagicMock(side_effect=error))
        assert dispatcher.dispatch("synchostname", CREDENTIALS, session) == ReturnCode.SUCCESS
        assert session.hostname_info.dns_suffix_os == ""
        assert session.hostname_info.hostname == "host01"


class TestChangePassword:
    """changepassword handler."""

    def test_static_password(self, make_dispatcher, session):
        """-static sets the replacement password."""
        rc = make_dispatcher().dispatch("changepassword", ["-static", "N3wPass!"] + CREDENTIALS, session)
        assert rc == ReturnCode.SUCCESS
        assert session.static_password == "N3wPass!"
        assert session.password == "Passw0rd!"

    def test_passwords_starting_with_dash(self, make_dispatcher, session):
        """Leading punctuation in -password and -static is part of the value."""
        dispatcher = make_dispatcher()
        rc = dispatcher.dispatch("changepassword", ["-static", "-N3w!", "-password", "-Secr3t!", "-local"], session)
        assert rc == ReturnCode.SUCCESS
        assert session.static_password == "-N3w!"
        assert session.local_config.password == "-Secr3t!"
        dispatcher.password_reader.assert_not_called()

    def test_random_password_by_default(self, make_dispatcher, session):
        """Without -static the replacement stays empty (random)."""
        assert make_dispatcher().dispatch("changepassword", CREDENTIALS, session) == ReturnCode.SUCCESS
        assert session.static_password == ""


class TestSyncIP:
    """syncip handler."""

    def test_static_ip_only(self, make_dispatcher, session, mock_amt_command):
        """-staticip alone resolves without touching the engine."""
        rc = make_dispatcher().dispatch("syncip", ["-staticip=10.0.0.5"] + CREDENTIALS, session)
        assert rc == ReturnCode.SUCCESS
        assert session.ip_configuration.ip_address == "10.0.0.5"
        assert session.ip_configuration.netmask == ""
        mock_amt_command.get_lan_interface_settings.assert_not_called()

    def test_derived_from_host(self, make_dispatcher, session):
        """Without -staticip the host interface matching AMT is used."""
        assert make_dispatcher().dispatch("syncip", CREDENTIALS, session) == ReturnCode.SUCCESS
        assert session.ip_configuration.ip_address == "192.168.1.20"
        assert session.ip_configuration.netmask == "255.255.255.0"

    @pytest.mark.parametrize(
        "flag, expected",
        [
            ("-staticip", ReturnCode.MISSING_OR_INCORRECT_STATIC_IP),
            ("-netmask", ReturnCode.MISSING_OR_INCORRECT_NETWORK_MASK),
            ("-gateway", ReturnCode.MISSING_OR_INCORRECT_GATEWAY),
            ("-primarydns", ReturnCode.MISSING_OR_INCORRECT_PRIMARY_DNS),
            ("-secondarydns", ReturnCode.MISSING_OR_INCORRECT_SECONDARY_DNS),
        ],
    )
    def test_bad_flag_value(self, make_dispatcher, session, flag, expected):
        """A malformed value yields the flag specific code and no prompt."""
        dispatcher = make_dispatcher()
        assert dispatcher.dispatch("syncip", [flag, "bogus"] + REMOTE, session) == expected
        dispatcher.password_reader.assert_not_called()

    def test_engine_failure(self, make_dispatcher, session, mock_amt_command):
        """An engine failure surfaces as AMT connection failure."""
        mock_amt_command.get_lan_interface_settings.side_effect = HECIError("no device")
        assert make_dispatcher().dispatch("syncip", CREDENTIALS, session) == ReturnCode.AMT_CONNECTION_FAILED

    def test_short_engine_reply(self, make_dispatcher, session, mock_heci, pthi_response):
        """A truncated LAN settings reply is an AMT connection failure, not a crash."""
        mock_heci.receive.return_value = pthi_response(PTHICommand.GET_LAN_INTERFACE_SETTINGS, b"")
        dispatcher = make_dispatcher(amt_command=AMTCommand(transport_factory=lambda: mock_heci))
        assert dispatcher.dispatch("syncip", ["-local"], session) == ReturnCode.AMT_CONNECTION_FAILED
        dispatcher.password_reader.assert_not_called()

    def test_no_matching_interface(self, make_dispatcher, make_enumerator, session):
        """No host interface with the AMT MAC fails the lookup."""
        dispatcher = make_dispatcher(net_enumerator=make_enumerator(("eth0", "11:22:33:44:55:66", ["10.0.0.2/8"])))
        assert dispatcher.dispatch("syncip", CREDENTIALS, session) == ReturnCode.OS_NETWORK_INTERFACES_LOOKUP_FAILED


class TestHelpers:
    """Usage text and password prompt."""

    def test_usage_lists_commands(self):
        usage = maintenance_usage("rpc")
        for command in ("changepassword", "syncdeviceinfo", "syncclock", "synchostname", "syncip"):
            assert command in usage
        assert "Usage: rpc maintenance COMMAND [OPTIONS]" in usage

    def test_read_password(self):
        with patch("amtrpc.maintenance.dispatcher.getpass.getpass", return_value="typed") as mock_getpass:
            assert read_password_from_user() == "typed"
        mock_getpass.assert_called_once_with("Please enter AMT Password: ")

    def test_read_password_eof(self):
        with patch("amtrpc.maintenance.dispatcher.getpass.getpass", side_effect=EOFError):
            assert read_password_from_user() == ""
