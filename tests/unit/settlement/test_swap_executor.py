"""Tests for swap execution and settlement."""

import pytest

from buyback.constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO
from buyback.errors import SlippageError, SpecifiedSlippageExceeded, Unauthorized
from buyback.events import LeftoverDeposited, SettlementMinted, SwapExecuted
from buyback.models import MintDirect, SwapThenSettle
from tests.helpers import (
    BENEFICIARY,
    HIGH_PROJECT_TOKEN,
    HOOK,
    NATIVE,
    ONE,
    OWNER,
    PROJECT_ID,
    PROJECT_TOKEN,
    RESERVED_BENEFICIARY,
    STRANGER,
    WETH,
    FakeTerminal,
)
from tests.helpers.world import build_world

HALF = ONE // 2


def settle(world, context, terminal=None):
    """Route, forward the funds to the hook as a terminal would, then settle."""
    params = world.hook.pay_params(context)
    world.vault.mint(context.settlement_token, HOOK, params.forward_amount)
    return params, world.hook.after_pay(context, params.result, terminal or world.terminal)


def project_balance(world, account, token=PROJECT_TOKEN):
    return world.vault.balance_of(token, account)


class TestSuccessfulSwap:
    def test_swap_burn_and_mint(self, world):
        pool = world.configure_pool(rate=(2, 1))
        context = world.context(weight=HALF)

        _, total = settle(world, context)

        assert total == 2 * ONE
        assert project_balance(world, BENEFICIARY) == 2 * ONE
        assert project_balance(world, HOOK) == 0
        assert world.vault.balance_of(WETH, pool.address) == ONE
        assert world.vault.balance_of(WETH, HOOK) == 0
        assert world.controller.burn_calls == [(HOOK, PROJECT_ID, 2 * ONE)]
        (mint,) = world.controller.mint_calls
        assert mint.token_count == 2 * ONE
        assert mint.use_reserved_rate

    def test_events(self, world):
        pool = world.configure_pool(rate=(2, 1))
        settle(world, world.context(weight=HALF))

        (swap,) = world.events.of_type(SwapExecuted)
        assert swap.pool_id == pool.address
        assert swap.amount_paid_to_pool == ONE
        assert swap.amount_received == 2 * ONE
        (minted,) = world.events.of_type(SettlementMinted)
        assert minted.total_minted == 2 * ONE
        assert minted.partial_mint_count == 0
        assert world.events.of_type(LeftoverDeposited) == []

    def test_project_token0_sells_token1(self, world):
        pool = world.configure_pool()
        settle(world, world.context(weight=HALF))

        (call,) = pool.swap_calls
        assert call["recipient"] == HOOK
        assert call["zero_for_one"] is False
        assert call["sqrt_price_limit_x96"] == MAX_SQRT_RATIO - 1
        assert call["amount_specified"] == ONE

    def test_project_token1_sells_token0(self):
        world = build_world(HIGH_PROJECT_TOKEN)
        pool = world.configure_pool(rate=(2, 1))
        _, total = settle(world, world.context(weight=HALF))

        (call,) = pool.swap_calls
        assert call["zero_for_one"] is True
        assert call["sqrt_price_limit_x96"] == MIN_SQRT_RATIO + 1
        assert total == 2 * ONE
        assert project_balance(world, BENEFICIARY, HIGH_PROJECT_TOKEN) == 2 * ONE

    def test_leftover_deposited_and_partially_minted(self, world):
        world.configure_pool(rate=(3, 1))
        context = world.context(weight=HALF, quote=(HALF, ONE))

        _, total = settle(world, context)

        # 1.5 from the swap, 0.25 for the unswapped half at weight 0.5
        assert total == 3 * HALF + HALF // 2
        assert world.terminal.balance_of(PROJECT_ID, WETH) == HALF
        assert world.vault.balance_of(WETH, world.terminal.address) == HALF
        (deposit,) = world.events.of_type(LeftoverDeposited)
        assert deposit.amount == HALF
        assert deposit.partial_mint_count == HALF // 2

    def test_unspent_swap_input_returned(self, world):
        """A pool that stops at its price limit leaves input with the hook."""
        pool = world.configure_pool(rate=(2, 1), max_amount_in=HALF)
        _, total = settle(world, world.context(weight=HALF))

        assert world.vault.balance_of(WETH, pool.address) == HALF
        assert world.terminal.balance_of(PROJECT_ID, WETH) == HALF
        assert total == ONE + HALF // 2

    def test_reserved_rate_applies_to_total(self):
        world = build_world(reserved_rate=2000)
        world.configure_pool(rate=(2, 1))
        _, total = settle(world, world.context(weight=HALF))

        assert total == 2 * ONE
        assert project_balance(world, BENEFICIARY) == 2 * ONE * 8 // 10
        assert project_balance(world, RESERVED_BENEFICIARY) == 2 * ONE * 2 // 10

    def test_claimed_preference_passed_through(self, world):
        world.configure_pool(rate=(2, 1))
        settle(world, world.context(weight=HALF, prefer_claimed_tokens=False))
        assert world.controller.mint_calls[0].prefer_claimed_tokens is False


class TestSlippage:
    def test_explicit_minimum_not_met(self, world):
        world.configure_pool(rate=(2, 1))
        context = world.context(weight=HALF, quote=(0, 3 * ONE))

        params = world.hook.pay_params(context)
        world.vault.mint(WETH, HOOK, ONE)
        before = world.state()

        with pytest.raises(SpecifiedSlippageExceeded) as exc_info:
            world.hook.after_pay(context, params.result, world.terminal)

        assert exc_info.value.amount_received == 2 * ONE
        assert exc_info.value.minimum_swap_amount_out == 3 * ONE
        assert isinstance(exc_info.value, SlippageError)
        assert world.state() == before

    def test_explicit_minimum_met_exactly(self, world):
        world.configure_pool(rate=(2, 1))
        _, total = settle(world, world.context(weight=HALF, quote=(0, 2 * ONE)))
        assert total == 2 * ONE

    def test_twap_minimum_is_not_enforced(self, world):
        """TWAP quotes only steer routing; a worse fill still settles."""
        world.configure_pool(rate=(1, 2))
        params, total = settle(world, world.context(weight=HALF // 2))

        assert params.result.minimum_swap_amount_out == 9 * 10**17
        assert total == HALF


class TestSwapFailure:
    """A failed swap mints the whole payment at the issuance weight."""

    @pytest.mark.parametrize(
        "pool_kwargs",
        [
            {"revert_swap": True},
            {"revert_after_callback": True},
            {"overcharge": 1},
        ],
    )
    def test_falls_back_to_mint(self, world, pool_kwargs):
        pool = world.configure_pool(rate=(2, 1), **pool_kwargs)
        _, total = settle(world, world.context(weight=HALF))

        assert total == HALF
        assert project_balance(world, BENEFICIARY) == HALF
        assert world.terminal.balance_of(PROJECT_ID, WETH) == ONE
        assert world.vault.balance_of(WETH, pool.address) == 0
        assert world.vault.balance_of(WETH, HOOK) == 0
        assert world.controller.burn_calls == []
        assert world.events.of_type(SwapExecuted) == []

    def test_failed_swap_skips_explicit_slippage_check(self, world):
        world.configure_pool(revert_swap=True)
        _, total = settle(world, world.context(weight=HALF, quote=(0, 3 * ONE)))
        assert total == HALF

    def test_pool_not_deployed(self, world):
        world.hook.registry.set_pool(OWNER, PROJECT_ID, WETH, 3000, 600, 1000)
        _, total = settle(world, world.context(weight=HALF, quote=(0, ONE)))
        assert total == HALF
        assert world.terminal.balance_of(PROJECT_ID, WETH) == ONE

    def test_no_pool_configured(self, world):
        _, total = settle(world, world.context(weight=HALF, quote=(0, ONE)))
        assert total == HALF

    def test_nothing_to_mint(self, world):
        world.configure_pool(revert_swap=True)
        _, total = settle(world, world.context(weight=0, quote=(0, 1)))

        assert total == 0
        assert world.controller.mint_calls == []
        assert world.terminal.balance_of(PROJECT_ID, WETH) == ONE
        (minted,) = world.events.of_type(SettlementMinted)
        assert minted.total_minted == 0


class TestFundRequest:
    def test_wrong_caller_aborts_payment(self, world):
        world.configure_pool(rate=(2, 1), callback_caller=STRANGER)
        context = world.context(weight=HALF)
        params = world.hook.pay_params(context)
        world.vault.mint(WETH, HOOK, ONE)
        before = world.state()

        with pytest.raises(Unauthorized):
            world.hook.after_pay(context, params.result, world.terminal)
        assert world.state() == before

    def test_second_callback_rejected(self, world):
        world.configure_pool(rate=(2, 1), callback_times=2)
        context = world.context(weight=HALF)
        params = world.hook.pay_params(context)
        world.vault.mint(WETH, HOOK, ONE)

        with pytest.raises(Unauthorized, match="consumed"):
            world.hook.after_pay(context, params.result, world.terminal)

    def test_request_dead_after_swap(self, world):
        pool = world.configure_pool(rate=(2, 1))
        settle(world, world.context(weight=HALF))

        with pytest.raises(Unauthorized):
            pool.last_callback(pool.address, 0, ONE)

    def test_request_dead_after_failed_swap(self, world):
        pool = world.configure_pool(revert_swap=True)
        settle(world, world.context(weight=HALF))

        with pytest.raises(Unauthorized):
            pool.last_callback(pool.address, 0, ONE)

    def test_requested_amount_side(self, world):
        pool = world.configure_pool(rate=(2, 1))
        settle(world, world.context(weight=HALF))
        request = pool.last_callback

        assert request.project_token_is_zero
        assert request.requested_amount(-5, 7) == 7
        assert request.amount_paid == ONE


class TestNativeSettlement:
    def test_native_wrapped_for_pool(self, world):
        pool = world.configure_pool(rate=(2, 1))
        context = world.context(weight=HALF, settlement_token=NATIVE)

        _, total = settle(world, context)

        assert total == 2 * ONE
        assert world.vault.balance_of(WETH, pool.address) == ONE
        assert world.vault.balance_of(NATIVE, HOOK) == 0
        assert world.vault.balance_of(WETH, HOOK) == 0

    def test_native_leftover_returned_as_native(self, world):
        world.configure_pool(rate=(2, 1))
        context = world.context(weight=HALF, settlement_token=NATIVE, quote=(HALF, ONE // 2))

        settle(world, context)

        assert world.terminal.balance_of(PROJECT_ID, NATIVE) == HALF
        assert world.vault.balance_of(NATIVE, world.terminal.address) == HALF


class TestAfterPay:
    def test_mint_direct_is_a_no_op(self, world_with_pool):
        before = world_with_pool.state()
        context = world_with_pool.context()
        assert world_with_pool.hook.after_pay(context, MintDirect(), world_with_pool.terminal) == 0
        assert world_with_pool.state() == before

    def test_unregistered_terminal(self, world):
        world.configure_pool(rate=(2, 1))
        rogue = FakeTerminal(STRANGER, world.vault, world.controller, world.environment)
        context = world.context(weight=HALF)
        params = world.hook.pay_params(context)
        assert isinstance(params.result, SwapThenSettle)
        world.vault.mint(WETH, HOOK, ONE)
        before = world.state()

        with pytest.raises(Unauthorized):
            world.hook.after_pay(context, params.result, rogue)
        assert world.state() == before
