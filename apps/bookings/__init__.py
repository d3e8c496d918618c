"""Bookings app package.

This app encapsulates the rental booking lifecycle: the Booking
aggregate and its state machine, admission checks for new requests
(authorization, identity and reputation, deposit floor, schedule
overlap) and the escrow side effects of every transition. External
services are reached through the contracts in `domain.gateways`.
"""
