"""
tokensale — settlement и admission-control ledger токен-сейла

Пакеты:
- core: ошибки, роли, активы, доменные модели, fixed-point арифметика, контракты
- oracle: адаптер price feed нативной монеты
- gatekeeper: цепочка gates допуска покупки
- ledger: SaleLedger и восстановление состояния по истории
- channels: каналы продажи (нативная монета, stable-активы)
"""

__version__ = "0.1.0"
