"""
胜率模拟器.

单个对手且公共牌已发完时精确枚举对手的所有手牌；其他情况使用蒙特卡洛模拟。
workers大于1时把模拟次数分给多个进程，每个进程使用独立的随机种子，最后合计胜/平次数.
"""

import logging
import random
from concurrent.futures import ProcessPoolExecutor
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from ..deck.card import Card
from ..deck.deck import Deck, remaining_deck
from ..eval.evaluator import evaluate7
from .types import EquityMode, EquityResult

logger = logging.getLogger(__name__)

DEFAULT_SIMULATIONS = 10000
BOARD_SIZE = 5


def _percent(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total else 0.0


def _validate_inputs(hero: Sequence[Card], board: Sequence[Card]) -> None:
    if len(hero) != 2:
        raise ValueError(f"英雄手牌必须是2张，实际: {len(hero)}")
    if len(board) > BOARD_SIZE:
        raise ValueError(f"公共牌不能超过5张，实际: {len(board)}")
    # 重复牌或非Card对象由remaining_deck报错
    remaining_deck(list(hero) + list(board))


def _hero_outcome(hero_score: int, board: List[Card], opponents: List[List[Card]]) -> int:
    """1表示英雄赢下所有对手，0表示没有输但至少平一家，-1表示输."""
    tied = False
    for opponent in opponents:
        score = evaluate7(opponent + board).score
        if score > hero_score:
            return -1
        if score == hero_score:
            tied = True
    return 0 if tied else 1


def _run_trials(hero: Tuple[Card, ...], board: Tuple[Card, ...], opponents: int,
                trials: int, seed: int) -> Tuple[int, int]:
    """
    在一个进程内跑若干次模拟.

    每次模拟洗一副排除已知牌的牌，先补齐公共牌，再给每个对手发两张.

    Returns:
        Tuple[int, int]: (英雄独赢次数, 平分次数)
    """
    deck = Deck(random.Random(seed), exclude=hero + board)
    need = BOARD_SIZE - len(board)
    wins = ties = 0
    for _ in range(trials):
        deck.reset()
        deck.shuffle()
        full_board = list(board) + deck.deal_cards(need)
        opponent_hands = [deck.deal_cards(2) for _ in range(opponents)]
        hero_score = evaluate7(list(hero) + full_board).score
        outcome = _hero_outcome(hero_score, full_board, opponent_hands)
        if outcome > 0:
            wins += 1
        elif outcome == 0:
            ties += 1
    return wins, ties


def _mc_worker(args: Tuple) -> Tuple[int, int]:
    return _run_trials(*args)


class EquitySimulator:
    """
    英雄胜率计算器.

    Examples:
        >>> simulator = EquitySimulator(simulations=2000, seed=7)
        >>> result = simulator.calculate(parse_cards("As Ah"), [], opponents=1)
        >>> 80 < result.hero_equity < 90
        True
    """

    def __init__(self, simulations: int = DEFAULT_SIMULATIONS, workers: int = 1,
                 seed: Optional[int] = None) -> None:
        if simulations <= 0:
            raise ValueError(f"模拟次数必须大于0: {simulations}")
        if workers <= 0:
            raise ValueError(f"进程数必须大于0: {workers}")
        self.simulations = simulations
        self.workers = workers
        self._rng = random.Random(seed)

    def calculate(self, hero: Sequence[Card], board: Sequence[Card], opponents: int) -> EquityResult:
        """
        计算英雄对N个随机对手的胜率.

        没有对手时直接返回100%；单个对手且公共牌已发完时精确枚举；其他情况蒙特卡洛.

        Args:
            hero: 英雄的2张手牌
            board: 已知公共牌（0-5张）
            opponents: 对手数量

        Returns:
            EquityResult: 胜率结果；剩余牌不够时返回50/0占位结果

        Raises:
            ValueError: 手牌不是2张、公共牌超过5张或存在重复牌时
        """
        _validate_inputs(hero, board)
        if opponents < 0:
            raise ValueError(f"对手数量不能为负数: {opponents}")
        if opponents == 0:
            return EquityResult.no_opponents()
        if len(board) == BOARD_SIZE and opponents == 1:
            return self.calculate_exact(hero, board)
        return self.monte_carlo(hero, board, opponents)

    def monte_carlo(self, hero: Sequence[Card], board: Sequence[Card], opponents: int,
                    simulations: Optional[int] = None) -> EquityResult:
        """
        蒙特卡洛模拟.

        Args:
            hero: 英雄手牌
            board: 已知公共牌
            opponents: 对手数量
            simulations: 模拟次数，默认使用构造时的配置

        Returns:
            EquityResult: 胜率结果
        """
        _validate_inputs(hero, board)
        if opponents == 0:
            return EquityResult.no_opponents()
        trials = simulations or self.simulations
        known = tuple(hero) + tuple(board)
        needed = (BOARD_SIZE - len(board)) + 2 * opponents
        if len(remaining_deck(known)) < needed:
            logger.info("剩余牌不足: 需要%d张，%d个对手", needed, opponents)
            return EquityResult.unavailable(opponents)

        base_seed = self._rng.randrange(1 << 30)
        wins, ties = self._dispatch(tuple(hero), tuple(board), opponents, trials, base_seed)
        logger.debug("蒙特卡洛完成: %d次, 胜%d 平%d", trials, wins, ties)
        return EquityResult(
            hero_equity=_percent(wins, trials),
            tie_equity=_percent(ties, trials),
            opponent_count=opponents,
            simulations=trials,
            mode=EquityMode.MONTE_CARLO,
        )

    def _dispatch(self, hero: Tuple[Card, ...], board: Tuple[Card, ...], opponents: int,
                  trials: int, base_seed: int) -> Tuple[int, int]:
        workers = min(self.workers, trials)
        if workers <= 1:
            return _run_trials(hero, board, opponents, trials, base_seed)

        chunk = trials // workers
        args_list = []
        for i in range(workers):
            count = chunk if i < workers - 1 else trials - chunk * (workers - 1)
            args_list.append((hero, board, opponents, count, base_seed + i + 1))

        wins = ties = 0
        with ProcessPoolExecutor(max_workers=workers) as executor:
            for worker_wins, worker_ties in executor.map(_mc_worker, args_list):
                wins += worker_wins
                ties += worker_ties
        return wins, ties

    def calculate_exact(self, hero: Sequence[Card], board: Sequence[Card]) -> EquityResult:
        """
        单个对手的精确胜率.

        公共牌已发完时枚举对手在剩余45张中的全部990种手牌；
        公共牌未发完时退回为一个对手的蒙特卡洛.
        """
        _validate_inputs(hero, board)
        if len(board) < BOARD_SIZE:
            return self.monte_carlo(hero, board, 1)

        board_list = list(board)
        hero_score = evaluate7(list(hero) + board_list).score
        wins = ties = total = 0
        for opponent in combinations(remaining_deck(list(hero) + board_list), 2):
            total += 1
            score = evaluate7(list(opponent) + board_list).score
            if hero_score > score:
                wins += 1
            elif hero_score == score:
                ties += 1
        return EquityResult(
            hero_equity=_percent(wins, total),
            tie_equity=_percent(ties, total),
            opponent_count=1,
            simulations=total,
            mode=EquityMode.EXACT,
        )

    def matchup(self, hero: Sequence[Card], villain: Sequence[Card],
                board: Sequence[Card]) -> EquityResult:
        """
        两手已知手牌的精确对抗胜率.

        枚举公共牌的所有补齐方式，要求已知公共牌至少3张.

        Raises:
            ValueError: 公共牌少于3张或存在重复牌时
        """
        if len(villain) != 2:
            raise ValueError(f"对手手牌必须是2张，实际: {len(villain)}")
        if len(board) < 3:
            raise ValueError(f"精确对抗需要至少3张公共牌，实际: {len(board)}")
        _validate_inputs(hero, board)
        known = list(hero) + list(villain) + list(board)
        remaining = remaining_deck(known)
        need = BOARD_SIZE - len(board)
        wins = ties = total = 0
        for runout in combinations(remaining, need):
            full_board = list(board) + list(runout)
            hero_score = evaluate7(list(hero) + full_board).score
            villain_score = evaluate7(list(villain) + full_board).score
            total += 1
            if hero_score > villain_score:
                wins += 1
            elif hero_score == villain_score:
                ties += 1
        return EquityResult(
            hero_equity=_percent(wins, total),
            tie_equity=_percent(ties, total),
            opponent_count=1,
            simulations=total,
            mode=EquityMode.EXACT,
        )

    def equity_for_snapshot(self, snapshot) -> Optional[EquityResult]:
        """
        快照上英雄对剩余对手的胜率.

        Args:
            snapshot: ReplaySnapshot

        Returns:
            Optional[EquityResult]: 英雄手牌未知或英雄已弃牌时为None
        """
        hero = snapshot.hero
        if hero is None or not hero.is_active or any(card is None for card in hero.hole_cards):
            return None
        opponents = sum(1 for player in snapshot.players
                        if player.is_active and not player.is_hero)
        return self.calculate(list(hero.hole_cards), list(snapshot.board), opponents)
