"""
Web application for Fuzzy Skateboard Braking Analysis

Interactive dashboard to run braking simulations and inspect the results.
"""

import logging
from typing import Any, Dict, List

import dash
from dash import dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate
import numpy as np
import plotly.express as px
import plotly.graph_objs as go

from skateboard import BrakingSimulator, FuzzyBrakeController, SkateboardParams, run_speed_sweep
from skateboard.analysis import RunAnalyzer
from skateboard.sweep import control_surface

logger = logging.getLogger(__name__)

controller = FuzzyBrakeController()


def _number_input(label: str, input_id: str, value: float, step: float, width: str = "12%") -> html.Div:
    return html.Div([
        html.Label(label, style={'fontWeight': 'bold', 'marginBottom': '5px'}),
        dcc.Input(
            id=input_id,
            type='number',
            value=value,
            step=step,
            style={'width': '100%', 'padding': '8px'}
        ),
    ], style={'width': width, 'display': 'inline-block', 'marginRight': '15px', 'verticalAlign': 'top'})


# Initialize Dash app
app = dash.Dash(__name__)
app.title = "Fuzzy Skateboard Braking Analysis"

# Define app layout
app.layout = html.Div([
    html.Div([
        html.H1("Fuzzy Skateboard Braking Analysis",
                style={'textAlign': 'center', 'marginBottom': '30px'}),

        html.Div([
            _number_input("Mass (kg):", 'mass-input', 70.0, 1.0),
            _number_input("Initial Speed (m/s):", 'speed-input', 6.0, 0.5),
            _number_input("Obstacle (m):", 'obstacle-input', 20.0, 1.0),
            _number_input("Brake μ:", 'mu-input', 0.7, 0.05),
            _number_input("Incline (deg):", 'incline-input', 0.0, 0.5),
            _number_input("Rolling Resistance:", 'rolling-input', 0.01, 0.005),
            _number_input("Eject Threshold (m/s²):", 'eject-input', 8.0, 0.5),
        ], style={'marginBottom': '15px'}),

        html.Div([
            html.Div([
                html.Label("Sweep Speeds (m/s, comma-separated):",
                           style={'fontWeight': 'bold', 'marginBottom': '5px'}),
                dcc.Input(
                    id='sweep-input',
                    type='text',
                    value='2,4,6,8,10',
                    style={'width': '100%', 'padding': '8px'}
                ),
            ], style={'width': '40%', 'display': 'inline-block', 'marginRight': '20px'}),

            html.Button('Run Simulation', id='run-button',
                        style={'width': '20%', 'padding': '10px', 'fontSize': '16px',
                               'backgroundColor': '#4CAF50', 'color': 'white',
                               'border': 'none', 'borderRadius': '5px', 'cursor': 'pointer'})
        ], style={'marginBottom': '30px', 'padding': '20px', 'backgroundColor': '#f5f5f5',
                  'borderRadius': '10px'}),

        html.Div(id='status-message', style={'marginBottom': '20px', 'fontSize': '14px'}),

        dcc.Loading(
            id="loading",
            type="default",
            children=[
                html.Div(id='results-container')
            ]
        )
    ], style={'maxWidth': '1400px', 'margin': '0 auto', 'padding': '20px'})
])


@app.callback(
    [Output("results-container", "children"), Output("status-message", "children")],
    [Input("run-button", "n_clicks")],
    [
        State("mass-input", "value"),
        State("speed-input", "value"),
        State("obstacle-input", "value"),
        State("mu-input", "value"),
        State("incline-input", "value"),
        State("rolling-input", "value"),
        State("eject-input", "value"),
        State("sweep-input", "value"),
    ],
)
def update_results(
    n_clicks: int | None,
    mass: float,
    initial_speed: float,
    obstacle: float,
    mu: float,
    incline_deg: float,
    rolling: float,
    eject_threshold: float,
    sweep_str: str,
) -> tuple[Any, Any]:
    """Run simulation and update results"""
    if n_clicks is None:
        raise PreventUpdate

    try:
        if mass is None or mass <= 0:
            return [], html.Div("Error: Mass must be positive.", style={"color": "red"})

        if initial_speed is None or initial_speed < 0 or initial_speed > 15:
            return [], html.Div(
                "Error: Initial speed must be between 0 and 15 m/s.",
                style={"color": "red"},
            )

        if incline_deg is None or abs(incline_deg) > 30:
            return [], html.Div(
                "Error: Incline must be between -30 and 30 degrees.",
                style={"color": "red"},
            )

        params = SkateboardParams.from_degrees(
            incline_deg,
            mass=mass,
            initial_speed=initial_speed,
            obstacle_position=obstacle,
            mu=mu,
            rolling_resistance=rolling,
            eject_decel_threshold=eject_threshold,
        )
        sweep_speeds = sorted(float(s.strip()) for s in sweep_str.split(",") if s.strip())

        simulator = BrakingSimulator(params, controller=controller)
        result = simulator.simulate()
        analysis = RunAnalyzer(params).analyze(result)
        sweep = run_speed_sweep(sweep_speeds, params, controller=controller)

        reason = analysis["stop_reason"] or "still running"
        status_msg = html.Div(
            f"Simulation complete! Run ended: {reason} after {analysis['stop_time']:.2f} s.",
            style={"color": "green"},
        )

        return create_results_layout(result.samples, analysis, sweep, sweep_speeds), status_msg

    except Exception as e:
        logger.exception("Simulation failed")
        error_msg = f"Error: {str(e)}"
        return [], html.Div(error_msg, style={"color": "red"})


def _time_series(samples: np.ndarray, column: int, title: str, axis: str, scale: float = 1.0) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=samples[:, 0],
            y=samples[:, column] * scale,
            mode="lines",
            name=title,
            line=dict(width=2),
            hovertemplate=f"Time: %{{x:.2f}}s<br>{axis}: %{{y:.3f}}<extra></extra>",
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title=axis,
        hovermode="closest",
        height=350,
        template="plotly_white",
    )
    return fig


def create_results_layout(
    samples: np.ndarray,
    analysis: Dict[str, Any],
    sweep: Dict[float, Dict[str, Any]],
    sweep_speeds: List[float],
) -> html.Div:
    """Create the results visualization layout"""
    # Summary table
    table_rows = [
        html.Tr([html.Th("Metric"), html.Th("Value")]),
        html.Tr([html.Td("Outcome"), html.Td(analysis["stop_reason"] or "-")]),
        html.Tr([html.Td("Stop Time (s)"), html.Td(f"{analysis['stop_time']:.2f}")]),
        html.Tr([html.Td("Stopping Distance (m)"), html.Td(f"{analysis['stopping_distance']:.2f}")]),
        html.Tr([html.Td("Distance Left (m)"), html.Td(f"{analysis['final_distance']:.2f}")]),
        html.Tr([html.Td("Peak Decel (g)"), html.Td(f"{analysis['peak_decel_g']:.2f}")]),
        html.Tr([html.Td("Mean Brake (%)"), html.Td(f"{analysis['mean_brake'] * 100:.1f}")]),
        html.Tr([html.Td("Braking Work (J)"), html.Td(f"{analysis['braking_work']:.0f}")]),
    ]
    outcome_color = {"rest": "green", "obstacle": "red", "eject": "orange"}

    # 1-4. Time series of the single run
    fig_x = _time_series(samples, 1, "Position Over Time", "Position (m)")
    fig_v = _time_series(samples, 2, "Velocity Over Time", "Velocity (m/s)")
    fig_brake = _time_series(samples, 4, "Brake Intensity Over Time", "Brake (%)", scale=100.0)
    fig_dist = _time_series(samples, 5, "Distance To Obstacle", "Distance (m)")

    # 5. Stopping distance by initial speed
    speed_labels = [f"{s:g} m/s" for s in sweep_speeds]
    stop_distances = [sweep[s]["analysis"]["stopping_distance"] for s in sweep_speeds]
    colors_bar = [
        outcome_color.get(sweep[s]["analysis"]["stop_reason"], "gray") for s in sweep_speeds
    ]
    fig_sweep = go.Figure()
    fig_sweep.add_trace(
        go.Bar(
            x=speed_labels,
            y=stop_distances,
            marker_color=colors_bar,
            text=[sweep[s]["analysis"]["stop_reason"] for s in sweep_speeds],
            textposition="outside",
            hovertemplate="Speed: %{x}<br>Stopping Distance: %{y:.2f}m<extra></extra>",
        )
    )
    fig_sweep.update_layout(
        title="Stopping Distance by Initial Speed",
        xaxis_title="Initial Speed",
        yaxis_title="Stopping Distance (m)",
        height=400,
        template="plotly_white",
    )

    # 6. Controller surface
    config = controller.get_config()
    speeds = np.linspace(config.speed.low, config.speed.high, 41)
    distances = np.linspace(config.distance.low, config.distance.high, 41)
    surface = control_surface(controller, speeds, distances)
    fig_surface = px.imshow(
        surface * 100,
        x=speeds,
        y=distances,
        origin="lower",
        aspect="auto",
        labels={"x": "Speed (m/s)", "y": "Distance (m)", "color": "Brake (%)"},
        title="Fuzzy Brake Surface",
    )
    fig_surface.update_layout(height=400, template="plotly_white")

    return html.Div([
        html.H2("Simulation Results", style={"marginTop": "30px", "marginBottom": "20px"}),
        html.Div([
            html.H3("Summary Table", style={"marginBottom": "15px"}),
            html.Table(
                table_rows,
                style={
                    "width": "50%",
                    "borderCollapse": "collapse",
                    "marginBottom": "30px",
                    "fontSize": "14px",
                    "color": outcome_color.get(analysis["stop_reason"], "black"),
                },
            ),
        ], style={"marginBottom": "30px"}),
        html.Div([
            html.Div([
                html.Div([dcc.Graph(figure=fig_x)],
                         style={"width": "48%", "display": "inline-block", "marginRight": "2%"}),
                html.Div([dcc.Graph(figure=fig_v)],
                         style={"width": "48%", "display": "inline-block"}),
            ], style={"marginBottom": "30px"}),
            html.Div([
                html.Div([dcc.Graph(figure=fig_brake)],
                         style={"width": "48%", "display": "inline-block", "marginRight": "2%"}),
                html.Div([dcc.Graph(figure=fig_dist)],
                         style={"width": "48%", "display": "inline-block"}),
            ], style={"marginBottom": "30px"}),
            html.Div([
                html.Div([dcc.Graph(figure=fig_sweep)],
                         style={"width": "48%", "display": "inline-block", "marginRight": "2%"}),
                html.Div([dcc.Graph(figure=fig_surface)],
                         style={"width": "48%", "display": "inline-block"}),
            ], style={"marginBottom": "30px"}),
        ]),
    ])


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=8050)
