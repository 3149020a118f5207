# -*- coding: utf-8 -*-
"""
Flask + Socket.IO server
Bridge between the browser canvas and the scattering engine
"""

import os
import sys
import threading
import time
from typing import Optional, Dict, Any

from flask import Flask, send_from_directory, jsonify
from flask_socketio import SocketIO, emit

import config as static_config
from physics_engine import expected_bin_fractions, rutherford_angle_numba
from simulation import SimulationLoop, FrameSnapshot

WEB_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'web')


# ============================================================================
# Engine
# ============================================================================

latest_snapshot: Optional[FrameSnapshot] = None


def store_snapshot(snapshot: FrameSnapshot) -> None:
    """Frame callback: the browser does the painting, we only keep the latest frame"""
    global latest_snapshot
    latest_snapshot = snapshot


engine = SimulationLoop(on_frame=store_snapshot)
simulation_lock = threading.Lock()
simulation_thread: Optional[threading.Thread] = None


def current_state() -> Dict[str, Any]:
    if latest_snapshot is None:
        return engine.get_frame_snapshot().to_dict()
    return latest_snapshot.to_dict()


def now_ms() -> float:
    return time.perf_counter() * 1000.0


def simulation_loop():
    """Background frame clock

    One engine tick per frame at static_config.FPS, state pushed after each tick.
    """
    frame_time = 1.0 / static_config.FPS

    while True:
        start_time = time.perf_counter()

        with simulation_lock:
            ticked = engine.running
            if ticked:
                engine.tick(now_ms())
                state = current_state()

        if not ticked:
            time.sleep(0.1)
            continue

        socketio.emit('state_update', state)

        elapsed = time.perf_counter() - start_time
        sleep_time = frame_time - elapsed
        if sleep_time > 0:
            time.sleep(sleep_time)


def start_simulation_thread() -> threading.Thread:
    global simulation_thread
    if simulation_thread is None or not simulation_thread.is_alive():
        simulation_thread = threading.Thread(target=simulation_loop, daemon=True)
        simulation_thread.start()
    return simulation_thread


# ============================================================================
# Flask app
# ============================================================================

app = Flask(__name__, static_folder=WEB_DIR, static_url_path='')
app.config['SECRET_KEY'] = 'rutherford-simulator-secret'
# Histogram keys are sent in bin order
app.json.sort_keys = False
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')


@app.route('/')
def index():
    return send_from_directory(WEB_DIR, 'index.html')


@app.route('/api/config')
def get_config():
    with simulation_lock:
        return jsonify(engine.params.to_dict())


@app.route('/api/snapshot')
def get_snapshot():
    with simulation_lock:
        return jsonify(current_state())


# ============================================================================
# Socket.IO events
# ============================================================================

@socketio.on('connect')
def handle_connect():
    print('[Server] Client connected')
    with simulation_lock:
        config_data = engine.params.to_dict()
        state = current_state()
        running = engine.running
    emit('config', config_data)
    emit('status', {'running': running})
    emit('state_update', state)


@socketio.on('disconnect')
def handle_disconnect():
    print('[Server] Client disconnected')


@socketio.on('start')
def handle_start():
    with simulation_lock:
        engine.start()
    emit('status', {'running': True}, broadcast=True)


@socketio.on('pause')
def handle_pause():
    with simulation_lock:
        engine.pause()
    emit('status', {'running': False}, broadcast=True)


@socketio.on('toggle')
def handle_toggle():
    with simulation_lock:
        running = engine.toggle()
    emit('status', {'running': running}, broadcast=True)


@socketio.on('reset')
def handle_reset():
    with simulation_lock:
        engine.reset()
        state = current_state()
    emit('status', {'running': False}, broadcast=True)
    # Clients clear their view only on this acknowledgement
    emit('reset_ack', state, broadcast=True)


@socketio.on('update_config')
def handle_update_config(data: Dict[str, Any]):
    if not isinstance(data, dict):
        emit('config_error', {'message': 'update_config expects an object'})
        return

    with simulation_lock:
        try:
            changed = engine.configure_from_dict(data)
        except (TypeError, ValueError) as e:
            print(f'[Server] Rejected config update {data}: {e}')
            emit('config_error', {'message': str(e)})
            return
        config_data = engine.params.to_dict()
        running = engine.running
        state = current_state()

    emit('config', config_data, broadcast=True)
    # A stopped engine has already redrawn; push that frame so the view follows the controls
    if changed and not running:
        emit('state_update', state, broadcast=True)
    print(f'[Server] Config updated: {changed}')


# ============================================================================
# Entry point
# ============================================================================

def main():
    import socket

    port = static_config.SERVER_PORT

    def is_port_in_use(port: int) -> bool:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind(('127.0.0.1', port))
                return False
            except OSError:
                return True

    if is_port_in_use(port):
        print("=" * 50)
        print(f" Error: port {port} is already in use.")
        print(" Another server instance is probably running.")
        print("=" * 50)
        sys.exit(1)

    print("=" * 50)
    print(" Rutherford scattering simulator")
    print(f" http://localhost:{port}")
    print("=" * 50)

    # Trigger the Numba JIT compile before the first client shows up
    print("[Server] Warming up physics kernels (first JIT compile may take a few seconds)...")
    rutherford_angle_numba(10.0, 79.0, 5.0, 1.0)
    expected_bin_fractions(79, 5.0)
    print("[Server] Physics kernels ready")

    start_simulation_thread()
    socketio.run(app, host='127.0.0.1', port=port, debug=False, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
