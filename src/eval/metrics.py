from collections import Counter


def _overlap(predicted, expected):
    return sum((Counter(predicted) & Counter(expected)).values())

def precision(predicted, expected):
    if not predicted:
        return 1.0 if not expected else 0.0
    return _overlap(predicted, expected) / len(predicted)

def recall(predicted, expected):
    if not expected:
        return 1.0
    return _overlap(predicted, expected) / len(expected)

def f1(predicted, expected):
    p = precision(predicted, expected)
    r = recall(predicted, expected)
    return 2 * p * r / (p + r) if (p + r) else 0.0

def exact_match(predicted, expected):
    return 1.0 if Counter(predicted) == Counter(expected) else 0.0
