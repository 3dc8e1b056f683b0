"""
Trade Executor

The user's trade desk: offer searches on the trade block, counter-offer
requests, and execution of an accepted trade.

Rules enforced for the user team:
- All actions require an open trade window
- Offer searches and counter requests count against a daily action limit
- At most MAX_SELECTED_PLAYERS players per request
- Execution checks roster ownership, salary matching for both teams and
  the minimum roster size before anything moves
"""

from datetime import date
from typing import List, Optional, Sequence
import logging

from league.player import Player
from league.ratings import RatingFunction, overall_rating
from league.team import Team
from salary_cap.cap_validator import TradeSalaryValidator
from transactions.counter_offer_generator import CounterOfferGenerator
from transactions.models import TradeInitiator, TradeOffer, Transaction, TransactionPlayer
from transactions.trade_counter import DailyTradeCounter
from transactions.trade_exceptions import (
    InvalidTradeError,
    RosterSizeError,
    SalaryMatchingError,
    TooManyPlayersSelectedError,
    TradeLimitReachedError,
    TradeWindowClosedError,
)
from transactions.trade_offer_generator import TradeOfferGenerator
from transactions.transaction_constants import PackageParameters, UserTradeLimits
from transactions.transaction_timing_validator import TransactionTimingValidator


class TradeExecutor:
    """
    User-initiated trade actions for one team.

    The executor carries the user's DailyTradeCounter for the session; it
    resets automatically when the date changes.

    Example:
        >>> desk = TradeExecutor(user_team_id="BOS")
        >>> offers = desk.request_offers([tatum], boston, league, date(2025, 12, 1))
        >>> best = offers[0]
        >>> transaction = desk.execute_trade(
        ...     boston, team_by_id[best.team_id], [tatum], list(best.players), date(2025, 12, 1)
        ... )
    """

    def __init__(
        self,
        user_team_id: str,
        offer_generator: Optional[TradeOfferGenerator] = None,
        counter_generator: Optional[CounterOfferGenerator] = None,
        salary_validator: Optional[TradeSalaryValidator] = None,
        timing_validator: Optional[TransactionTimingValidator] = None,
        max_daily_actions: int = UserTradeLimits.MAX_DAILY_TRADE_ACTIONS,
        max_selected_players: int = UserTradeLimits.MAX_SELECTED_PLAYERS,
        rating_fn: RatingFunction = overall_rating
    ):
        self.user_team_id = user_team_id
        self.rating_fn = rating_fn
        self.offer_generator = offer_generator or TradeOfferGenerator(rating_fn=rating_fn)
        self.counter_generator = counter_generator or CounterOfferGenerator(rating_fn=rating_fn)
        self.salary_validator = salary_validator or TradeSalaryValidator()
        self.timing_validator = timing_validator or TransactionTimingValidator()
        self.max_daily_actions = max_daily_actions
        self.max_selected_players = max_selected_players
        self.counter: Optional[DailyTradeCounter] = None
        self.logger = logging.getLogger(__name__)

    # ========================================================================
    # ACTION ACCOUNTING
    # ========================================================================

    def actions_used(self, current_date: date) -> int:
        counter = DailyTradeCounter.for_date(current_date, previous=self.counter)
        return counter.count_for(self.user_team_id)

    def remaining_actions(self, current_date: date) -> int:
        return max(0, self.max_daily_actions - self.actions_used(current_date))

    def _check_window(self, current_date: date, operation: str) -> None:
        is_allowed, reason = self.timing_validator.is_trade_allowed(current_date)
        if not is_allowed:
            raise TradeWindowClosedError(current_date, reason, operation=operation)

    def _check_selection(self, players: Sequence[Player], operation: str) -> None:
        if len(players) > self.max_selected_players:
            raise TooManyPlayersSelectedError(len(players), self.max_selected_players, operation=operation)

    def _use_action(self, current_date: date, operation: str) -> None:
        """Consume one daily action or raise TradeLimitReachedError"""
        counter = DailyTradeCounter.for_date(current_date, previous=self.counter)
        if not counter.has_capacity(self.user_team_id, self.max_daily_actions):
            raise TradeLimitReachedError(self.user_team_id, self.max_daily_actions, operation=operation)
        self.counter = counter.record([self.user_team_id])

    # ========================================================================
    # ACTIONS
    # ========================================================================

    def request_offers(
        self,
        shopped_players: Sequence[Player],
        my_team: Team,
        all_teams: Sequence[Team],
        current_date: date,
        desired_positions: Sequence[str] = ()
    ) -> List[TradeOffer]:
        """
        Search the league for offers on the user's trade block.

        Raises:
            TradeWindowClosedError: Outside the trade window
            TooManyPlayersSelectedError: Too many players shopped
            TradeLimitReachedError: No trade actions left today
        """
        operation = "request_offers"
        self._check_window(current_date, operation)
        self._check_selection(shopped_players, operation)
        if not shopped_players:
            return []
        self._use_action(current_date, operation)

        return self.offer_generator.generate_offers(
            shopped_players, my_team, all_teams, desired_positions
        )

    def request_counters(
        self,
        requested_players: Sequence[Player],
        target_team: Team,
        my_team: Team,
        current_date: date,
        all_teams: Sequence[Team] = ()
    ) -> List[TradeOffer]:
        """
        Ask target_team what it wants for the requested players.

        Raises:
            TradeWindowClosedError: Outside the trade window
            TooManyPlayersSelectedError: Too many players requested
            TradeLimitReachedError: No trade actions left today
        """
        operation = "request_counters"
        self._check_window(current_date, operation)
        self._check_selection(requested_players, operation)
        if not requested_players or target_team is None:
            return []
        self._use_action(current_date, operation)

        return self.counter_generator.generate_counters(
            requested_players, target_team, my_team, all_teams
        )

    def execute_trade(
        self,
        my_team: Team,
        partner_team: Team,
        outgoing: Sequence[Player],
        incoming: Sequence[Player],
        current_date: date,
        analysis: Sequence[str] = ()
    ) -> Transaction:
        """
        Execute an accepted trade between the user team and a partner.

        Both rosters are swapped only after every check passes.

        Args:
            my_team: The user's team
            partner_team: The trade partner
            outgoing: Players leaving my_team
            incoming: Players arriving from partner_team
            current_date: Current simulated date
            analysis: Justification to store on the transaction (e.g. an offer's analysis)

        Returns:
            USER Transaction recorded from my_team's perspective

        Raises:
            TradeWindowClosedError: Outside the trade window
            InvalidTradeError: Malformed trade
            SalaryMatchingError: Salary matching fails for either team
            RosterSizeError: A team would drop below the minimum roster size
        """
        operation = "execute_trade"
        self._check_window(current_date, operation)
        self._validate_trade(my_team, partner_team, outgoing, incoming, operation)

        my_team.swap_players(outgoing=outgoing, incoming=incoming)
        partner_team.swap_players(outgoing=incoming, incoming=outgoing)

        transaction = Transaction(
            date=current_date,
            team_id=my_team.team_id,
            team_name=my_team.name,
            partner_team_id=partner_team.team_id,
            partner_team_name=partner_team.name,
            acquired=tuple(TransactionPlayer.from_player(p, self.rating_fn) for p in incoming),
            traded=tuple(TransactionPlayer.from_player(p, self.rating_fn) for p in outgoing),
            analysis=tuple(analysis),
            initiated_by=TradeInitiator.USER,
        )
        self.logger.info(
            f"{transaction.description}: {len(incoming)} in, {len(outgoing)} out"
        )
        return transaction

    def _validate_trade(
        self,
        my_team: Team,
        partner_team: Team,
        outgoing: Sequence[Player],
        incoming: Sequence[Player],
        operation: str
    ) -> None:
        context = {
            "team_id": my_team.team_id,
            "partner_team_id": partner_team.team_id,
            "outgoing": [p.player_id for p in outgoing],
            "incoming": [p.player_id for p in incoming],
        }

        if my_team.team_id != self.user_team_id:
            raise InvalidTradeError(
                f"Team {my_team.team_id} is not the user team", context, operation
            )
        if my_team.team_id == partner_team.team_id:
            raise InvalidTradeError("A team cannot trade with itself", context, operation)
        if not outgoing and not incoming:
            raise InvalidTradeError("Trade must move at least one player", context, operation)
        if not my_team.has_players(outgoing):
            raise InvalidTradeError(f"Outgoing players are not all on {my_team.name}", context, operation)
        if not partner_team.has_players(incoming):
            raise InvalidTradeError(f"Incoming players are not all on {partner_team.name}", context, operation)

        is_legal, reason = self.salary_validator.validate_trade(my_team, partner_team, outgoing, incoming)
        if not is_legal:
            raise SalaryMatchingError(reason, context, operation)

        min_size = PackageParameters.MIN_ROSTER_SIZE
        for team, size_after in (
            (my_team, len(my_team.roster) - len(outgoing) + len(incoming)),
            (partner_team, len(partner_team.roster) - len(incoming) + len(outgoing)),
        ):
            if size_after < min_size:
                raise RosterSizeError(team.team_id, size_after, min_size, operation)
