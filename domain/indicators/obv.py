"""On-Balance Volume (OBV) indicator."""


def obv(closes: list[float], volumes: list[float]) -> float:
    """Calculate the final On-Balance Volume value.

    Adds volume on up closes, subtracts it on down closes and leaves the
    total unchanged on equal closes, starting from 0.

    Example:
        >>> obv([10, 11, 10, 12, 11], [1000, 1500, 1200, 1800, 1000])
        1100
    """
    if len(closes) != len(volumes):
        raise ValueError("closes and volumes must have same length")

    cumulative = 0
    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            cumulative += volumes[i]
        elif closes[i] < closes[i - 1]:
            cumulative -= volumes[i]

    return cumulative
