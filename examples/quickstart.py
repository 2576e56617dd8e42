from __future__ import annotations


def main() -> None:
    import math

    from heatpde import (
        ExerciseStyle,
        HeatDomain,
        HeatPDESolver,
        HeatProblem,
        OptionType,
        bs_price_heat,
    )

    problem = HeatProblem(
        domain=HeatDomain(xleft=0.0, xright=1.0, taufinal=0.1),
        left=lambda tau: 0.0,
        right=lambda tau: 0.0,
        initial=lambda x: math.sin(math.pi * x),
    )
    solver = HeatPDESolver(problem, method="cn", linear_solver="thomas")
    sol = solver.solve(n=50, m=50)
    print("CN u(0.5, 0.1):", sol.u_final[25], "exact:", math.exp(-math.pi**2 * 0.1))

    for style in (ExerciseStyle.EUROPEAN, ExerciseStyle.AMERICAN):
        price = bs_price_heat(
            OptionType.PUT,
            spot=50.0,
            strike=50.0,
            r=0.10,
            sigma=0.40,
            expiry=5.0 / 12.0,
            style=style,
        )
        print(f"{style.value} put:", price)


if __name__ == "__main__":
    main()
