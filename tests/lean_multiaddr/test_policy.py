"""Tests for the observed-address policy."""

from __future__ import annotations

from lean_multiaddr import Multiaddr, ObservedAddressDecision, observed_address_decision


class TestObservedAddressDecision:
    """Only repeated observations are kept."""

    def test_first_sighting_dropped(self, local_tcp: Multiaddr) -> None:
        """A new observation is not advertised."""
        assert observed_address_decision([], local_tcp) is ObservedAddressDecision.DROP

    def test_repeat_sighting_kept(self, local_tcp: Multiaddr) -> None:
        """An address reported before is kept."""
        observed = [Multiaddr("/ip4/127.0.0.1/tcp/4001")]
        assert observed_address_decision(observed, local_tcp) is ObservedAddressDecision.KEEP

    def test_compares_by_value(self) -> None:
        """Equivalent spellings count as the same observation."""
        observed = {Multiaddr("/ip6/0:0:0:0:0:0:0:1/tcp/1")}
        decision = observed_address_decision(observed, Multiaddr("/ip6/::1/tcp/1"))
        assert decision is ObservedAddressDecision.KEEP

    def test_inputs_untouched(self, local_tcp: Multiaddr, relay_tcp: Multiaddr) -> None:
        """The policy never mutates the observation history."""
        observed = [relay_tcp]
        observed_address_decision(observed, local_tcp)
        assert observed == [relay_tcp]
