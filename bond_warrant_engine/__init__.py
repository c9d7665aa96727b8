"""
Bond Warrant Simulator Engine

Modules:
- utils: normal distribution + percent/time/grid helpers
- models: input/output records, JSON round trip, input shape check
- config: engine settings + default scenario
- bonds: annual-coupon bond pricing + cashflow tables
- options: Black-Scholes value/Greeks on the bond price
- risk: duration estimate, price-change estimate, position theta
- costs: spread/commission arithmetic
- breakeven: break-even yield search
- simulator: run_simulation orchestrator
- scenarios: payoff/time-decay curves, rate shocks, scenario comparison

UI and persistence layers should import from this package.
"""
