from gridge import create_app, get_lifecycle, socketio

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    try:
        socketio.run(app, debug=True)
    finally:
        with app.app_context():
            get_lifecycle().close()
