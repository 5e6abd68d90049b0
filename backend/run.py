from arena import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # The reloader would build a second app with its own match clock
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], use_reloader=False, allow_unsafe_werkzeug=True)
